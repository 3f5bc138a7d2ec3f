import os


os.environ.setdefault("FORMS_BACKEND_URI", "/backend")
os.environ.setdefault("LOG_LEVEL", "INFO")
