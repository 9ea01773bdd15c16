from carbwise.carb_store import CarbStore


def test_add_food_accumulates_and_tracks_last():
    store = CarbStore()
    store.add_food("Big Mac", 45.0, "McDonald's nutrition", ["https://www.mcdonalds.com"])
    store.add_food("Apple", 25.0)

    assert store.total_carbs() == 70.0
    assert store.last_food() == {"name": "Apple", "carbs": 25.0}

    first, second = store.logged_items()
    assert first["details"] == "McDonald's nutrition"
    assert first["citations"] == ["https://www.mcdonalds.com"]
    assert "details" not in second
    assert "citations" not in second
    assert second["logged_at"]


def test_goal_and_remaining():
    assert CarbStore().daily_carb_goal() is None
    assert CarbStore(daily_carb_goal=0).daily_carb_goal() is None

    store = CarbStore(daily_carb_goal=100)
    store.add_food("Pasta", 60)
    assert store.remaining_carbs() == 40
    store.add_food("Bread", 50)
    assert store.remaining_carbs() == 0.0


def test_reset_clears_tally():
    store = CarbStore(daily_carb_goal=150)
    store.add_food("Rice", 45)
    store.reset()

    snapshot = store.snapshot()
    assert snapshot["total_carbs"] == 0.0
    assert snapshot["last_food"] == {"name": "", "carbs": 0.0}
    assert snapshot["logged_items"] == []
    assert snapshot["daily_carb_goal"] == 150


def test_logged_items_are_copies():
    store = CarbStore()
    store.add_food("Rice", 45)
    store.logged_items()[0]["carbs"] = 0
    assert store.logged_items()[0]["carbs"] == 45
