"""
Persistence package: models plus the shared DBStorage singleton.

The engine is built lazily from DATABASE_URL; the application factory
repoints it through storage.configure() and creates the session with
storage.reload().
"""
from models.db_storage import DBStorage

storage = DBStorage()
