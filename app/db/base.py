from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Note: Models are registered through app.db.models so that init_db() sees
# every table. All models must import Base from this module.
