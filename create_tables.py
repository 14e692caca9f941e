# create_tables.py
from sqlalchemy import text

from remindme.database import DATABASE_URL, engine, create_all_tables


def create_tables(drop_existing: bool = False):
    """Create all tables"""
    try:
        if drop_existing:
            with engine.connect() as conn:
                conn.execute(text("DROP TABLE IF EXISTS notifications"))
                conn.execute(text("DROP TABLE IF EXISTS reminders"))
                conn.commit()

        create_all_tables()
        print(f"✅ All tables created successfully on {DATABASE_URL}")

    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise


if __name__ == "__main__":
    import sys
    create_tables(drop_existing="--drop" in sys.argv)
