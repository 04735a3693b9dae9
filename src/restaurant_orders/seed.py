from datetime import datetime, timedelta, timezone
from typing import List, Optional

from restaurant_orders.schemas.order import Order


# (id, стол, позиции, сумма, статус, оплата, пожелания, минут назад)
_DEMO = [
    ("ORD001", "Table 1", [("1", "Butter Chicken", 2, 450, "Main Course", "Creamy butter chicken curry"),
                           ("2", "Naan", 4, 40, "Breads", "Traditional Indian bread")],
     1060, "pending", "pending", "Extra spicy please", 5),
    ("ORD002", "Table 2", [("3", "Paneer Tikka", 1, 350, "Starters", "Grilled cottage cheese with spices"),
                           ("4", "Garlic Naan", 2, 50, "Breads", "Naan bread with garlic")],
     450, "pending", "pending", "No onions", 8),
    ("ORD003", "Table 3", [("5", "Chicken Biryani", 2, 400, "Rice", "Fragrant rice with chicken and spices"),
                           ("6", "Raita", 1, 50, "Accompaniments", "Yogurt with mild spices")],
     850, "pending", "pending", None, 10),
    ("ORD004", "Table 4", [("7", "Dal Makhani", 1, 250, "Main Course", "Creamy black lentils"),
                           ("8", "Butter Naan", 3, 45, "Breads", "Buttered naan bread")],
     385, "in-progress", "pending", "Less spicy", 15),
    ("ORD005", "Table 5", [("9", "Malai Kofta", 1, 300, "Main Course", "Cottage cheese dumplings in creamy sauce"),
                           ("10", "Jeera Rice", 1, 150, "Rice", "Cumin flavored rice")],
     450, "in-progress", "pending", None, 18),
    ("ORD006", "Table 6", [("11", "Tandoori Chicken", 1, 450, "Starters", "Clay oven roasted chicken"),
                           ("12", "Mint Chutney", 1, 30, "Accompaniments", "Fresh mint sauce")],
     480, "in-progress", "pending", "Well done", 20),
    ("ORD007", "Table 7", [("13", "Palak Paneer", 1, 280, "Main Course", "Cottage cheese in spinach gravy"),
                           ("14", "Roti", 4, 20, "Breads", "Whole wheat bread")],
     360, "completed", "paid", None, 30),
    ("ORD008", "Table 8", [("15", "Chilli Chicken", 1, 350, "Starters", "Spicy Indo-Chinese chicken"),
                           ("16", "Fried Rice", 1, 200, "Rice", "Chinese style fried rice")],
     550, "completed", "paid", None, 35),
    ("ORD009", "Table 9", [("17", "Gulab Jamun", 2, 80, "Desserts", "Sweet milk dumplings"),
                           ("18", "Mango Lassi", 2, 100, "Beverages", "Mango yogurt smoothie")],
     360, "completed", "paid", None, 40),
]


def demo_orders(now: Optional[datetime] = None) -> List[Order]:
    """
    Демонстрационные заказы для пустого хранилища, новые первыми.
    """
    now = now or datetime.now(timezone.utc)
    orders = []
    for order_id, table, items, amount, status, payment_status, instructions, minutes_ago in _DEMO:
        created = now - timedelta(minutes=minutes_ago)
        orders.append(
            Order(
                id=order_id,
                table=table,
                items=[
                    {"id": i, "name": n, "quantity": q, "price": p, "category": c, "description": d}
                    for i, n, q, p, c, d in items
                ],
                amount=amount,
                status=status,
                payment_status=payment_status,
                special_instructions=instructions,
                created_at=created,
                updated_at=created,
            )
        )
    return orders
