# stonecrafter/content/__init__.py
