from .env import load_project_dotenv  # noqa: F401
