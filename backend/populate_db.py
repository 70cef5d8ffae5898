import os
import sys

from dotenv import load_dotenv

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

load_dotenv()

from database import SessionLocal, init_db
from models.users import User
from models.product import Product
from utils.csv_import import CSVImportError, import_products
from utils.hashing import generate_password, get_password_hash

# Configuration
DATA_DIR = os.path.join(os.path.dirname(__file__), "data_source")
CATALOG_CSV = os.getenv("CATALOG_CSV", os.path.join(DATA_DIR, "products.csv"))
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
# End Configuration


def ensure_admin(session, username=ADMIN_USERNAME, password=None):
    """Create the first admin account. Returns the plain password, or None if it already exists."""
    if session.query(User).filter(User.role == "admin").first():
        return None

    password = password or os.getenv("ADMIN_PASSWORD") or generate_password(12)
    session.add(User(username=username, password_hash=get_password_hash(password), role="admin"))
    session.commit()
    return password


def load_catalog(session, path=CATALOG_CSV, replace=False):
    """Import the catalog CSV. With replace=True the existing products are removed first."""
    with open(path, "rb") as f:
        content = f.read()

    if replace:
        for product in session.query(Product).all():
            session.delete(product)
        session.commit()

    return import_products(session, content)


def populate_database(csv_path=CATALOG_CSV, replace=False):
    """Main execution function to populate database."""
    init_db()
    session = SessionLocal()
    try:
        password = ensure_admin(session)
        if password:
            print(f"Created admin user '{ADMIN_USERNAME}' with password: {password}")
        else:
            print("Admin user already exists.")

        if not os.path.exists(csv_path):
            print(f"No catalog file at {csv_path}, skipping product import.")
            return

        stats = load_catalog(session, csv_path, replace=replace)
        print(
            f"Imported {stats['rows']} rows: {stats['products_created']} new products, "
            f"{stats['variants_created']} new variants, {stats['variants_updated']} updated."
        )
    except CSVImportError as e:
        print(f"Catalog import failed: {e}")
    finally:
        session.close()


if __name__ == "__main__":
    # Usage: python populate_db.py [path/to/products.csv] [--replace]
    paths = [a for a in sys.argv[1:] if not a.startswith("--")]
    populate_database(
        csv_path=paths[0] if paths else CATALOG_CSV,
        replace="--replace" in sys.argv,
    )
