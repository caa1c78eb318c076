"""Menu, tables and settings used when the database starts empty."""

from __future__ import annotations

TEMPERATURE = ["Hot", "Iced"]
ICE_LEVEL = ["Regular ice", "Less ice", "No ice"]
SUGAR_LEVEL = ["Regular sugar", "Half sugar", "Light sugar", "No sugar"]

ESTATE = "Estate Roasted Coffee"
LATTE = "Lattes & Coffee"
TEA = "Tea & Juice"


def _dish(dish_id: str, name: str, category: str, price: int, options: list[str]) -> dict:
    return {
        "id": dish_id,
        "name": name,
        "category": category,
        "price": price,
        "is_available": True,
        "options": list(options),
        "allow_custom_notes": True,
        "image_url": None,
    }


DEFAULT_DISHES: list[dict] = [
    _dish("c1", "Cup of Excellence", ESTATE, 220, TEMPERATURE),
    _dish("c2", "Cloud Coffee", ESTATE, 190, TEMPERATURE),
    _dish("c3", "Royal Hot Spring Coffee", ESTATE, 160, TEMPERATURE),
    _dish("c4", "Tiger Mountain Coffee", ESTATE, 150, TEMPERATURE),
    _dish("c5", "Antigua Volcano Coffee", ESTATE, 140, TEMPERATURE),
    _dish("c6", "Old Sam Coffee", ESTATE, 140, TEMPERATURE),
    _dish("c7", "Maya Classic Coffee", ESTATE, 130, TEMPERATURE),
    _dish("c8", "Estate Iced Coffee", ESTATE, 130, ICE_LEVEL),
    _dish("l1", "Cappuccino", LATTE, 160, TEMPERATURE),
    _dish("l2", "Flavored Latte", LATTE, 160, ["Original", "Caramel", "Hazelnut", "Vanilla", "Rose", *TEMPERATURE]),
    _dish("l3", "Mochaccino", LATTE, 160, TEMPERATURE),
    _dish("l4", "Caramel Macchiato", LATTE, 160, TEMPERATURE),
    _dish("l5", "Vienna Coffee", LATTE, 160, TEMPERATURE),
    _dish("l6", "Cocoa Latte", LATTE, 160, TEMPERATURE),
    _dish("l7", "Rose Iced Coffee", LATTE, 160, ICE_LEVEL),
    _dish("l8", "Vanilla Iced Coffee", LATTE, 160, ICE_LEVEL),
    _dish("l9", "Matcha Coffee", LATTE, 160, TEMPERATURE),
    _dish("l10", "House Iced Coffee", LATTE, 160, ICE_LEVEL),
    _dish("l11", "Espresso", LATTE, 140, ["Hot"]),
    _dish("t1", "House Milk Tea", TEA, 140, ["No ice", "Less ice", "Regular ice", "Warm", "Hot", *SUGAR_LEVEL]),
    _dish("t2", "Kumquat Tea", TEA, 140, [*TEMPERATURE, *SUGAR_LEVEL]),
    _dish("t3", "Rose Tea", TEA, 140, [*TEMPERATURE, *SUGAR_LEVEL]),
    _dish("t4", "Goji Chrysanthemum Tea", TEA, 140, [*TEMPERATURE, *SUGAR_LEVEL]),
    _dish("t5", "Ginger Longan Tea (hot)", TEA, 180, ["Hot", *SUGAR_LEVEL]),
    _dish("t6", "Vegetable Juice (iced)", TEA, 130, ICE_LEVEL),
    _dish("t7", "Honey Lemon Juice (iced)", TEA, 130, [*ICE_LEVEL, *SUGAR_LEVEL]),
    _dish("t8", "Apple Juice (iced)", TEA, 130, ICE_LEVEL),
    _dish("t9", "Mango Juice (iced)", TEA, 150, ICE_LEVEL),
    _dish("t10", "Green Tangerine Tea (hot)", TEA, 150, ["Hot"]),
]

DEFAULT_TABLES: list[dict] = [
    {"id": "tab1", "name": "Table 1", "capacity": 2, "qr_code": "DG-01"},
    {"id": "tab2", "name": "Table 2", "capacity": 2, "qr_code": "DG-02"},
    {"id": "tab3", "name": "Table 3", "capacity": 4, "qr_code": "DG-03"},
    {"id": "tab4", "name": "Table 4", "capacity": 4, "qr_code": "DG-04"},
    {"id": "tab5", "name": "Sofa Corner", "capacity": 6, "qr_code": "DG-05"},
]

DEFAULT_CONFIG: dict = {
    "restaurant_name": "Don Gus Coffee",
    "is_gps_enabled": False,
    "gps_radius_m": 100.0,
    "center_lat": 25.0330,
    "center_lng": 121.5654,
    "is_service_fee_enabled": False,
    "service_fee_rate": 0.1,
}
