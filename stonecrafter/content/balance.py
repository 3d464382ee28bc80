# stonecrafter/content/balance.py
DEFAULTS = {
    "max_health": 100,
    "cards_per_round": 3,
    "win_currency": 10,
    "new_stone_chance": 0.10,
    "stone_loss_chance": 0.15,
    "opponent_queue_size": 100,
    "deck_copies": 2,
    "salvage_per_rarity": 10,
    "crack_second_stone_chance": 0.10,
    "crack_third_stone_chance": 0.01,
}

CAPS = {
    "weight_min": 1,
    "weight_max": 100,
    "rarity_max": 100,
    "magic_max": 100,
    "hardness_max": 100,  # hundredths
}
