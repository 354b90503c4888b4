"""
Chore Wars static game data
Loot catalog and milestone titles. Editing this file changes what the
generators hand out; already-recorded drops and feed entries are untouched.
"""

# Loot catalog: (name, description, rarity)
# Tier is picked first by weight (config.RARITY_WEIGHTS), then an item uniformly within it.
LOOT_TABLE = [
    # --- Common ---
    ("Crusty Sponge", "It's seen better days, but it's yours now!", "Common"),
    ("Lost TV Remote", "Found between the couch cushions. Still sticky.", "Common"),
    ("Mismatched Sock", "Its partner is lost to the ages.", "Common"),
    ("Dust Bunny", "A fluffy companion from under the bed.", "Common"),
    ("Empty Pen", "Ran out of ink at the worst possible moment.", "Common"),
    ("Expired Coupon", "Good until last month. So close!", "Common"),
    ("Mystery Stain", "We don't ask questions about this one.", "Common"),
    ("Bent Paperclip", "Once held important documents together.", "Common"),
    ("Crumb Collection", "Archaeological evidence of last week's snacks.", "Common"),
    ("Forgotten Receipt", "From a store that no longer exists.", "Common"),

    # --- Uncommon ---
    ("Golden Spatula", "Flips pancakes with legendary precision!", "Uncommon"),
    ("Enchanted Feather Duster", "+5 to cleaning speed!", "Uncommon"),
    ("Magical Laundry Basket", "Never overflows, somehow.", "Uncommon"),
    ("Singing Vacuum Cleaner", "Hums a cheerful tune while working.", "Uncommon"),
    ("Self-Organizing Drawer", "Items arrange themselves. Probably.", "Uncommon"),
    ("Lucky Dish Towel", "Dishes almost wash themselves!", "Uncommon"),
    ("Perpetual Calendar", "Always shows the right date. Magic!", "Uncommon"),

    # --- Rare ---
    ("Sword of Dish Slaying", "Legendary weapon against dirty plates!", "Rare"),
    ("Crown of the Chore Champion", "Worn by household heroes!", "Rare"),
    ("Staff of Infinite Motivation", "+100 willpower to do chores!", "Rare"),
    ("Cape of Stain Resistance", "Spills fear this legendary garment!", "Rare"),
    ("Amulet of Time Management", "Grants the power of productivity!", "Rare"),
]

# Milestone titles: (attribute, threshold) -> title
# Pairs missing here fall back to "<Attribute> Master".
MILESTONE_TITLES = {
    ("Strength", 10): "Mop Squire",
    ("Strength", 25): "Laundry Lifter",
    ("Strength", 50): "Furniture Mover",
    ("Strength", 100): "Titan of Tidiness",
    ("Strength", 250): "Grime Crusher",
    ("Strength", 500): "Legendary Strongarm",

    ("Intelligence", 10): "Apprentice Organizer",
    ("Intelligence", 25): "Pantry Strategist",
    ("Intelligence", 50): "Master Planner",
    ("Intelligence", 100): "Sage of Schedules",
    ("Intelligence", 250): "Archmage of Order",
    ("Intelligence", 500): "Omniscient Homekeeper",

    ("Constitution", 10): "Sturdy Scrubber",
    ("Constitution", 25): "Tireless Tidier",
    ("Constitution", 50): "Iron Housekeeper",
    ("Constitution", 100): "Unbreakable Hero",
    ("Constitution", 250): "Eternal Caretaker",
    ("Constitution", 500): "Guardian of the Hearth",
}

STAT_EMOJI = {
    "Strength": "💪",
    "Intelligence": "🧠",
    "Constitution": "❤️",
}

STAT_ABBREVIATIONS = {
    "Strength": "STR",
    "Intelligence": "INT",
    "Constitution": "CON",
}
