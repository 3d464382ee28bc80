# stonecrafter/engine/__init__.py
