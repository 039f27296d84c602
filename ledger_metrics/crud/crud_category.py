from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List

from ledger_metrics.db.core import CategoryDB, CategoryType, NotFoundError
from ledger_metrics.models.category import CategoryCreate, CategoryUpdate


def create_db_category(db: Session, user_id: int, category_data: CategoryCreate) -> CategoryDB:
    if category_data.parent_category_id is not None:
        parent = read_db_category(db, category_data.parent_category_id, user_id)
        if parent is None:
            raise NotFoundError(f"Parent category with id {category_data.parent_category_id} not found")

    db_category = CategoryDB(
        user_id=user_id,
        name=category_data.name,
        category_type=CategoryType(category_data.category_type.value),
        parent_category_id=category_data.parent_category_id,
    )
    try:
        db.add(db_category)
        db.commit()
        db.refresh(db_category)
        return db_category
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Category with name '{category_data.name}' already exists")


def read_db_category(db: Session, category_id: int, user_id: int) -> Optional[CategoryDB]:
    return db.query(CategoryDB).filter(
        CategoryDB.id == category_id,
        CategoryDB.user_id == user_id
    ).first()


def read_db_categories(db: Session, user_id: int) -> List[CategoryDB]:
    return db.query(CategoryDB).filter(CategoryDB.user_id == user_id).order_by(CategoryDB.name).all()


def update_db_category(db: Session, category_id: int, user_id: int, category_updates: CategoryUpdate) -> CategoryDB:
    db_category = read_db_category(db, category_id, user_id)
    if not db_category:
        raise NotFoundError(f"Category with id {category_id} not found")

    update_data = category_updates.model_dump(exclude_unset=True)

    parent_id = update_data.get("parent_category_id")
    if parent_id is not None:
        parent = read_db_category(db, parent_id, user_id)
        if parent is None:
            raise NotFoundError(f"Parent category with id {parent_id} not found")
        # Walk up from the new parent; meeting this category again would close a cycle
        while parent is not None:
            if parent.id == db_category.id:
                raise ValueError("A category cannot be its own parent or ancestor")
            parent = parent.parent

    for field, value in update_data.items():
        if field == "category_type":
            if value is not None:
                db_category.category_type = CategoryType(value.value)
        elif field == "name" and value is None:
            continue
        else:
            setattr(db_category, field, value)

    name = db_category.name
    try:
        db.commit()
        db.refresh(db_category)
        return db_category
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Category with name '{name}' already exists")


def delete_db_category(db: Session, category_id: int, user_id: int) -> bool:
    db_category = read_db_category(db, category_id, user_id)
    if not db_category:
        raise NotFoundError(f"Category with id {category_id} not found")

    if db_category.transactions or db_category.budgets:
        raise ValueError("Cannot delete a category that is used by transactions or budgets")

    db.delete(db_category)
    db.commit()
    return True
