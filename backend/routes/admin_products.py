# backend/routes/admin_products.py
from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, File
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import role_required
from utils.audit import write_log
from utils.csv_import import CSVImportError, import_products
from utils.catalog_store import get_product
from models.users import User
from models.product import Product, ProductVariant
from schemas.catalog import ProductWithVariantsOut
import schemas.product as product_schemas

router = APIRouter(prefix="/admin/products", tags=["Admin products"])

ALLOWED_CSV_TYPES = {"text/csv", "application/vnd.ms-excel", "application/octet-stream"}


# ---- HELPERS ----
def _invalidate_catalog(request: Request):
    """Admin writes change the collection the query engine sees."""
    cache = getattr(request.app.state, "catalog_cache", None)
    if cache is not None:
        cache.invalidate()

def _client_ip(request: Request):
    return request.client.host if request.client else None

def _name_taken(db: Session, name: str, exclude_id: int = None) -> bool:
    query = db.query(Product).filter(Product.name == name)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first() is not None


# =========================
# CREATE
# =========================
@router.post("", response_model=ProductWithVariantsOut, status_code=201)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    if _name_taken(db, payload.name):
        raise HTTPException(status_code=409, detail="Product name already exists")

    sizes = [v.unit_size for v in payload.variants]
    if len(sizes) != len(set(sizes)):
        raise HTTPException(status_code=400, detail="Duplicate unit_size in variants")

    product = Product(**payload.model_dump(exclude={"variants"}))
    product.variants = [ProductVariant(**v.model_dump()) for v in payload.variants]
    db.add(product)
    db.commit()
    db.refresh(product)

    _invalidate_catalog(request)
    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products", resource_id=product.id,
        status="SUCCESS", ip=_client_ip(request), meta={"name": product.name},
    )
    return ProductWithVariantsOut.model_validate(get_product(db, product.id))


# =========================
# UPDATE (descriptive fields)
# =========================
@router.put("/{product_id}", response_model=ProductWithVariantsOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    product = get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    updates = payload.model_dump(exclude_unset=True)
    if "name" in updates and _name_taken(db, updates["name"], exclude_id=product.id):
        raise HTTPException(status_code=409, detail="Product name already exists")

    for key, value in updates.items():
        setattr(product, key, value)
    db.commit()

    _invalidate_catalog(request)
    write_log(
        db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products", resource_id=product_id,
        status="SUCCESS", ip=_client_ip(request), meta={"fields": sorted(updates)},
    )
    return ProductWithVariantsOut.model_validate(get_product(db, product_id))


# =========================
# UPDATE VARIANT (price / stock)
# =========================
@router.put("/{product_id}/variants/{variant_id}", response_model=ProductWithVariantsOut)
def update_variant(
    product_id: int,
    variant_id: int,
    payload: product_schemas.VariantUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    variant = db.query(ProductVariant).filter(
        ProductVariant.id == variant_id, ProductVariant.product_id == product_id
    ).first()
    if not variant:
        raise HTTPException(status_code=404, detail="Variant not found")

    updates = payload.model_dump(exclude_unset=True)
    if "price" in updates and updates["price"] is None:
        raise HTTPException(status_code=400, detail="Price cannot be empty")
    for key, value in updates.items():
        setattr(variant, key, value)
    db.commit()

    _invalidate_catalog(request)
    write_log(
        db, user_id=current_user.id, action="VARIANT_UPDATE", resource="products", resource_id=product_id,
        status="SUCCESS", ip=_client_ip(request), meta={"variant_id": variant_id, "fields": sorted(updates)},
    )
    return ProductWithVariantsOut.model_validate(get_product(db, product_id))


# =========================
# DELETE
# =========================
@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    pname = product.name
    db.delete(product)
    db.commit()

    _invalidate_catalog(request)
    write_log(
        db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products", resource_id=product_id,
        status="SUCCESS", ip=_client_ip(request), meta={"name": pname},
    )
    return {"detail": f"Product '{pname}' deleted"}


# =========================
# CSV IMPORT
# =========================
@router.post("/import", response_model=product_schemas.ImportSummary)
def import_products_csv(
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin")),
):
    if file.content_type and file.content_type not in ALLOWED_CSV_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type")

    try:
        content = file.file.read()
    finally:
        file.file.close()

    try:
        stats = import_products(db, content)
    except CSVImportError as e:
        write_log(
            db, user_id=current_user.id, action="PRODUCT_IMPORT", resource="products",
            status="FAIL", ip=_client_ip(request), meta={"filename": file.filename, "reason": str(e)},
        )
        raise HTTPException(status_code=400, detail=str(e))

    _invalidate_catalog(request)
    write_log(
        db, user_id=current_user.id, action="PRODUCT_IMPORT", resource="products",
        status="SUCCESS", ip=_client_ip(request), meta={"filename": file.filename, **stats},
    )
    return {"message": "Products imported successfully.", **stats}
