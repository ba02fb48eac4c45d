from sqlalchemy.orm import declarative_base

# Kept free of settings so Alembic can load metadata without DATABASE_URL.
Base = declarative_base()
