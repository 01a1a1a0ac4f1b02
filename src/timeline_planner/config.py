import os

TASKS_PATH = os.getenv("TASKS_PATH", "data/tasks.json")
DEFAULT_REMINDER_MINUTES = int(os.getenv("DEFAULT_REMINDER_MINUTES", "5"))

# Empty URL keeps reminders in process (InMemoryNotificationFacility).
NOTIFICATION_GATEWAY_URL = os.getenv("NOTIFICATION_GATEWAY_URL", "").strip()
NOTIFICATION_GATEWAY_TIMEOUT_S = float(os.getenv("NOTIFICATION_GATEWAY_TIMEOUT_S", "2.0"))

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "mock").strip().lower()
