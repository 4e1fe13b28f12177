import os
import tempfile

# Keep logs, settings and databases from test runs out of the real user data folder.
os.environ.setdefault("SQ_DATA_DIR", tempfile.mkdtemp(prefix="sq_tests_"))
