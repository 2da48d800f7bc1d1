import os
import tempfile

# Widget tests run headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
# Keep test logs out of the user's data folder
os.environ.setdefault("SEQUENCETRACKER_LOG_DIR", tempfile.mkdtemp(prefix="sequencetracker-log-"))
