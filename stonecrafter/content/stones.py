# stonecrafter/content/stones.py
COLORS = [
    "Red", "Blue", "Green", "Yellow", "Magenta", "Cyan", "White", "Black",
]

SHAPES = [
    "Cube", "Sphere", "Pyramid", "Prism", "Cylinder", "Obelisk", "Crystal", "Geode",
]
