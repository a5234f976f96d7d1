"""Built-in sample restaurants served whenever the directory is unavailable."""
from __future__ import annotations

from ..recommendations.models import Candidate

SAMPLE_CANDIDATES: list[Candidate] = [
    Candidate(
        id="1",
        name="The Italian Bistro",
        image="https://images.unsplash.com/photo-1555396273-367ea4eb4db5?w=800",
        categories=["Italian", "Pasta"],
        rating=4.5,
        price="$$",
        address="Downtown",
        photos=["https://images.unsplash.com/photo-1555396273-367ea4eb4db5?w=800"],
    ),
    Candidate(
        id="2",
        name="Sushi Master",
        image="https://images.unsplash.com/photo-1579584425555-c3ce17fd4351?w=800",
        categories=["Japanese", "Sushi"],
        rating=4.8,
        price="$$$",
        address="Midtown",
        photos=["https://images.unsplash.com/photo-1579584425555-c3ce17fd4351?w=800"],
    ),
    Candidate(
        id="3",
        name="Burger Palace",
        image="https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=800",
        categories=["American", "Burgers"],
        rating=4.3,
        price="$",
        address="Uptown",
        photos=["https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=800"],
    ),
    Candidate(
        id="4",
        name="Taco Fiesta",
        image="https://images.unsplash.com/photo-1565299624946-b28f40a0ae38?w=800",
        categories=["Mexican", "Tacos"],
        rating=4.6,
        price="$",
        address="East Side",
        photos=["https://images.unsplash.com/photo-1565299624946-b28f40a0ae38?w=800"],
    ),
    Candidate(
        id="5",
        name="Pizza Corner",
        image="https://images.unsplash.com/photo-1513104890138-7c749659a591?w=800",
        categories=["Italian", "Pizza"],
        rating=4.4,
        price="$$",
        address="West End",
        photos=["https://images.unsplash.com/photo-1513104890138-7c749659a591?w=800"],
    ),
    Candidate(
        id="6",
        name="Thai Garden",
        image="https://images.unsplash.com/photo-1559314809-0d155014e29e?w=800",
        categories=["Thai", "Asian"],
        rating=4.7,
        price="$$",
        address="South District",
        photos=["https://images.unsplash.com/photo-1559314809-0d155014e29e?w=800"],
    ),
    Candidate(
        id="7",
        name="BBQ Smokehouse",
        image="https://images.unsplash.com/photo-1528607929212-2636ec44253e?w=800",
        categories=["American", "BBQ"],
        rating=4.5,
        price="$$",
        address="North Quarter",
        photos=["https://images.unsplash.com/photo-1528607929212-2636ec44253e?w=800"],
    ),
    Candidate(
        id="8",
        name="Ramen House",
        image="https://images.unsplash.com/photo-1569718212165-3a8278d5f624?w=800",
        categories=["Japanese", "Ramen"],
        rating=4.6,
        price="$$",
        address="Central",
        photos=["https://images.unsplash.com/photo-1569718212165-3a8278d5f624?w=800"],
    ),
]
