"""Category service for database operations."""

from typing import List, Optional
from models.category import CATEGORY_TYPES, Category

_CATEGORY_SELECT = "SELECT id, name, type, description, color FROM categories"


class CategoryService:
    """Service for managing income and expense categories."""

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def find_all(self, category_type: Optional[str] = None) -> List[Category]:
        """Get categories ordered by name.

        Args:
            category_type: Optional "income" or "expense" filter.

        Returns:
            List of Category objects, ordered by name.
        """
        query = _CATEGORY_SELECT
        params = []
        if category_type is not None:
            query += " WHERE type = ?"
            params.append(category_type)
        query += " ORDER BY name"

        with self.db_manager.connect() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_category(row) for row in rows]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID, or None if it doesn't exist."""
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"{_CATEGORY_SELECT} WHERE id = ?", (category_id,)
            ).fetchone()
            return self._row_to_category(row) if row else None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by its (case-sensitive) name."""
        with self.db_manager.connect() as conn:
            row = conn.execute(f"{_CATEGORY_SELECT} WHERE name = ?", (name,)).fetchone()
            return self._row_to_category(row) if row else None

    def create(
        self,
        name: str,
        category_type: str = "expense",
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Category:
        """Create a new category.

        Args:
            name: Category name (should be unique).
            category_type: "income" or "expense".
            description: Optional description of the category.
            color: Optional display color.

        Returns:
            The created Category object with id populated.

        Raises:
            ValueError: If the category type is unknown.
            sqlite3.IntegrityError: If the name is already taken.
        """
        self._validate_type(category_type)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO categories (name, type, description, color) VALUES (?, ?, ?, ?)",
                (name, category_type, description, color),
            )
            conn.commit()

            return Category(
                id=cursor.lastrowid,
                name=name,
                type=category_type,
                description=description,
                color=color,
            )

    def update(
        self,
        category_id: int,
        name: str,
        category_type: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Category:
        """Update an existing category.

        Args:
            category_id: Category to update.
            name: New name.
            category_type: New type, or None to keep the current one. An
                expense category with budgets cannot change type.
            description: New description.
            color: New display color.

        Raises:
            ValueError: If the category type is unknown, or the category has
                budgets and would stop being an expense category.
            Exception: If category not found.
        """
        if category_type is not None:
            self._validate_type(category_type)

        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"{_CATEGORY_SELECT} WHERE id = ?", (category_id,)
            ).fetchone()
            if not row:
                raise Exception(f"Category with ID {category_id} not found")

            current = self._row_to_category(row)
            category_type = category_type or current.type

            if current.is_expense and category_type != "expense":
                budget_count = conn.execute(
                    "SELECT COUNT(*) FROM budgets WHERE category_id = ?", (category_id,)
                ).fetchone()[0]
                if budget_count:
                    raise ValueError(
                        f"Category {category_id} has {budget_count} budget(s) "
                        f"and must stay an expense category"
                    )

            conn.execute(
                "UPDATE categories SET name = ?, type = ?, description = ?, color = ? WHERE id = ?",
                (name, category_type, description, color, category_id),
            )
            conn.commit()

            return Category(
                id=category_id,
                name=name,
                type=category_type,
                description=description,
                color=color,
            )

    def delete(self, category_id: int) -> bool:
        """Delete a category by ID.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _validate_type(self, category_type: str) -> None:
        if category_type not in CATEGORY_TYPES:
            raise ValueError(
                f"Invalid category type '{category_type}'. "
                f"Must be one of: {', '.join(CATEGORY_TYPES)}"
            )

    def _row_to_category(self, row: tuple) -> Category:
        return Category(
            id=row[0], name=row[1], type=row[2], description=row[3], color=row[4]
        )
