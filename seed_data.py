"""
Seed script for the family tree database.

This script:
1. Creates the default relationship types (skips ones already present)
2. Optionally adds a small sample family with its relationships

Run:
    python seed_data.py            # types only
    python seed_data.py --sample   # types and sample family
"""

import sys

from familytree.config import configure_logging, settings
from familytree.seed import seed_relationship_types, seed_sample_family
from familytree.store.family_tree import FamilyTree


def main():
    configure_logging(settings.log_level)
    tree = FamilyTree(settings.database)
    
    print("=" * 80)
    print(f"SEEDING {settings.database.path}")
    print("=" * 80)
    
    if "--sample" in sys.argv:
        members = seed_sample_family(tree)
        print(f"✅ Added {len(members)} sample members")
    else:
        seed_relationship_types(tree)
    
    for rel_type in tree.get_all_relationship_types():
        inverse = "self" if rel_type.is_self_inverse else rel_type.inverse_type_id or "-"
        print(f"  {rel_type.name:<16} inverse: {inverse}")
    print(f"✅ {tree.relationships.count()} relationships stored")


if __name__ == "__main__":
    main()
