# settings/__init__.py
import os

DJANGO_ENV = os.getenv("DJANGO_ENV", "development").lower()

if DJANGO_ENV == "production":
    print("⚙️ Academy back office: PRODUCTION settings")
    from .production import *
else:
    print("🛠️ Academy back office: DEVELOPMENT settings")
    from .development import *
