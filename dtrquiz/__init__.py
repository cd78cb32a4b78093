"""
DTR Quiz - Dental tool recognition quiz engine

Shows pathology cases and scores the dental instrument the user holds up
to the camera. The engine provides:
- Per-frame classification adapter (argmax over classifier output)
- Stability buffer that debounces detections into one answer
- Answer evaluation with harmful-choice penalties
- The quiz session state machine and its polling loop
"""

__version__ = "0.1.0"
