"""Process-level entry points (the ``gemini-stream`` CLI lives in ``cli``)."""
