from __future__ import annotations

from .models import Recipe

SAMPLE_RECIPES: list[Recipe] = [
    Recipe(
        id="1",
        title="Classic Spaghetti Carbonara",
        image="https://images.unsplash.com/photo-1621996346565-e3dbc646d9a9?w=800",
        ready_in_minutes=25,
        servings=4,
        source_url="https://example.com/recipe1",
        summary="A classic Italian pasta dish with eggs, cheese, and pancetta.",
    ),
    Recipe(
        id="2",
        title="Homemade Margherita Pizza",
        image="https://images.unsplash.com/photo-1574071318508-1cdbab80d002?w=800",
        ready_in_minutes=45,
        servings=4,
        source_url="https://example.com/recipe2",
        summary="Traditional Italian pizza with fresh mozzarella and basil.",
    ),
    Recipe(
        id="3",
        title="BBQ Pulled Pork",
        image="https://images.unsplash.com/photo-1529193591184-b1d58069ecdd?w=800",
        ready_in_minutes=240,
        servings=8,
        source_url="https://example.com/recipe3",
        summary="Slow-cooked pulled pork with homemade BBQ sauce.",
    ),
    Recipe(
        id="4",
        title="Chicken Tacos",
        image="https://images.unsplash.com/photo-1565299585323-38174c2d2d2a?w=800",
        ready_in_minutes=30,
        servings=4,
        source_url="https://example.com/recipe4",
        summary="Delicious chicken tacos with fresh toppings.",
    ),
]
