"""Standard expense categories and their default ledger accounts.

Categories are grouped the same way the entry form lists them. Each group
name doubles as the middle segment of the default beancount account, so
"Dairy" maps to ``Expenses:Food:Dairy``.

Imported rows may carry any category text; these lists are suggestions
for manual entry, not a whitelist.
"""

import re
import unicodedata

from tallybook.domain.expense import DEFAULT_CATEGORY

CATEGORY_GROUPS: dict[str, tuple[str, ...]] = {
    "Food": (
        "Food / Pantry",
        "Snacks",
        "Beverages",
        "Coffee / Tea",
        "Alcohol",
        "Dairy",
        "Meat & Poultry",
        "Seafood",
        "Produce (Fruits & Vegetables)",
        "Frozen Foods",
        "Bakery / Bread",
        "Condiments & Spices",
        "Canned & Packaged Goods",
    ),
    "Household": (
        "Cleaning Supplies",
        "Paper Goods",
        "Kitchen Supplies",
        "Laundry Supplies",
        "Furniture",
        "Home Décor",
        "Small Appliances",
        "Bedding & Linens",
        "Tools & Hardware",
    ),
    "PersonalCare": (
        "Toiletries",
        "Skincare",
        "Haircare",
        "Cosmetics / Makeup",
        "Personal Hygiene",
        "Medications (OTC)",
        "Prescription Medicine",
        "Vitamins & Supplements",
        "Fitness & Exercise",
    ),
    "Clothing": (
        "Clothing",
        "Footwear",
        "Bags & Accessories",
        "Jewelry / Watches",
        "Laundry / Dry Cleaning",
    ),
    "Entertainment": (
        "Subscriptions",
        "Books & Magazines",
        "Games & Apps",
        "Hobbies & Crafts",
        "Sports & Outdoor",
        "Movies / Concerts / Events",
    ),
    "Transportation": (
        "Fuel / Gas",
        "Public Transit",
        "Ride Sharing",
        "Parking & Tolls",
        "Vehicle Maintenance & Repairs",
        "Car Insurance",
        "Car Loan / Lease",
    ),
    "Housing": (
        "Rent / Mortgage",
        "Electricity",
        "Water & Sewer",
        "Gas / Heating",
        "Internet",
        "Mobile Phone",
        "Cable / Streaming",
        "Trash / Recycling",
    ),
    "Dining": (
        "Restaurants",
        "Fast Food",
        "Cafés",
        "Bars & Nightlife",
        "Delivery / Takeout",
    ),
    "Financial": (
        "Banking Fees",
        "Credit Card Payments",
        "Loan Repayments",
        "Investments",
        "Insurance",
        "Professional Fees",
        "Trade Subscriptions",
    ),
    "Travel": (
        "Flights",
        "Hotels / Accommodation",
        "Taxis / Shuttles",
        "Rental Cars",
        "Travel Insurance",
        "Tours & Attractions",
        "Souvenirs",
    ),
    "Education": (
        "Tuition",
        "Books & Study Materials",
        "Online Courses",
        "School Supplies",
        "Software / Tools",
    ),
    "Pets": (
        "Pet Food",
        "Pet Supplies",
        "Veterinary Care",
        "Grooming",
        "Pet Insurance",
    ),
    "Family": (
        "Childcare",
        "Baby Supplies",
        "Allowances / Gifts",
        "Holidays / Celebrations",
    ),
    "Technology": (
        "Electronics",
        "Accessories",
        "Software Licenses",
        "Cloud Services",
        "Repairs",
    ),
    "Healthcare": (
        "Doctor Visits",
        "Dentist",
        "Vision / Eyewear",
        "Therapy / Counseling",
    ),
    "Miscellaneous": (
        "Donations & Charity",
        "Taxes",
        "Postage & Shipping",
        "Emergency Fund",
        "Miscellaneous",
        DEFAULT_CATEGORY,
    ),
}

EXPENSE_CATEGORIES: tuple[str, ...] = tuple(
    category for categories in CATEGORY_GROUPS.values() for category in categories
)

_CATEGORY_GROUP_BY_NAME: dict[str, str] = {
    category.lower(): group for group, categories in CATEGORY_GROUPS.items() for category in categories
}


def is_standard_category(category: str) -> bool:
    return category.strip().lower() in _CATEGORY_GROUP_BY_NAME


def account_component(text: str) -> str:
    """
    Turn free text into a single beancount account component.

    "Produce (Fruits & Vegetables)" -> "ProduceFruitsVegetables"
    "Cafés" -> "Cafes"
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    words = re.findall(r"[A-Za-z0-9]+", ascii_text)
    component = "".join(word[0].upper() + word[1:] for word in words)
    if not component:
        return "Uncategorized"
    # Components must start with a capital letter or digit.
    if not component[0].isupper() and not component[0].isdigit():
        component = "X" + component
    return component


def default_account_for_category(category: str) -> str:
    """Return the fallback ledger account for a category name."""
    name = category.strip() or DEFAULT_CATEGORY
    group = _CATEGORY_GROUP_BY_NAME.get(name.lower())
    if group is None:
        return f"Expenses:{account_component(name)}"
    return f"Expenses:{group}:{account_component(name)}"
