"""Check connectivity and row counts of the family tree database."""

import sys

from familytree.config import settings
from familytree.store.database import Database


db = Database(settings.database)

print(f"Checking database: {db.path}")
print("=" * 80)

if not db.ping():
    print("❌ Database connection failed")
    sys.exit(1)

db.init_schema()
for table in ("members", "relationship_types", "relationships"):
    print(f"{table:<20} {db.count_rows(table)}")
