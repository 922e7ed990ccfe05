"""Tests for GameConfig construction, validation and persistence."""

import json

import pytest

from snakekit.config import BuilderCell, CellKind, GameConfig, default_snake
from snakekit.snake import Direction


class TestDefaults:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.grid_size == 20
        assert cfg.initial_snake == ((10, 10), (9, 10), (8, 10))
        assert cfg.initial_direction is Direction.RIGHT
        assert cfg.obstacles == ()
        assert cfg.initial_foods == ()
        assert cfg.ticks_per_second == 8.0

    def test_default_snake_trails_behind_heading(self):
        assert default_snake(10, Direction.UP) == ((5, 5), (5, 6), (5, 7))

    def test_lists_are_normalised_to_tuples(self):
        cfg = GameConfig(initial_snake=[[3, 3]], obstacles=[[0, 0]])
        assert cfg.initial_snake == ((3, 3),)
        assert cfg.obstacles == ((0, 0),)
        hash(cfg)

    def test_direction_name_accepted(self):
        cfg = GameConfig(initial_snake=[(3, 3)], initial_direction="up")
        assert cfg.initial_direction is Direction.UP


class TestValidation:
    def test_grid_too_small(self):
        with pytest.raises(ValueError, match="at least 4"):
            GameConfig(grid_size=3, initial_snake=[(1, 1)])

    @pytest.mark.parametrize("tps", [0, -1, float("inf")])
    def test_bad_tick_rate(self, tps):
        with pytest.raises(ValueError, match="ticks_per_second"):
            GameConfig(ticks_per_second=tps)

    def test_empty_snake(self):
        with pytest.raises(ValueError, match="at least one cell"):
            GameConfig(initial_snake=[])

    def test_snake_out_of_bounds(self):
        with pytest.raises(ValueError, match="outside the grid"):
            GameConfig(grid_size=5, initial_snake=[(5, 0)])

    def test_snake_overlapping_itself(self):
        with pytest.raises(ValueError, match="overlaps itself"):
            GameConfig(initial_snake=[(3, 3), (2, 3), (3, 3)])

    def test_snake_not_contiguous(self):
        with pytest.raises(ValueError, match="not adjacent"):
            GameConfig(initial_snake=[(3, 3), (1, 3)])

    def test_heading_into_neck(self):
        with pytest.raises(ValueError, match="own body"):
            GameConfig(
                initial_snake=[(9, 10), (10, 10), (11, 10)],
                initial_direction=Direction.RIGHT,
            )

    def test_snake_overlapping_obstacle(self):
        with pytest.raises(ValueError, match="Obstacle"):
            GameConfig(obstacles=[(9, 10)])

    def test_food_on_obstacle(self):
        with pytest.raises(ValueError, match="overlaps an obstacle"):
            GameConfig(obstacles=[(1, 1)], initial_foods=[(1, 1)])

    def test_food_on_snake(self):
        with pytest.raises(ValueError, match="Food"):
            GameConfig(initial_foods=[(10, 10)])

    def test_duplicate_foods(self):
        with pytest.raises(ValueError, match="Duplicate food"):
            GameConfig(initial_foods=[(1, 1), (1, 1)])

    def test_unknown_direction(self):
        with pytest.raises(ValueError, match="Unknown direction"):
            GameConfig(initial_direction="north")


class TestFromBuilder:
    def test_splits_kinds(self):
        cfg = GameConfig.from_builder([
            {"x": 1, "y": 1, "kind": "food"},
            {"x": 2, "y": 2, "kind": "obstacle"},
            BuilderCell(3, 3, CellKind.FOOD),
        ])
        assert cfg.initial_foods == ((1, 1), (3, 3))
        assert cfg.obstacles == ((2, 2),)
        assert cfg.initial_snake == default_snake(20)

    def test_duplicate_coordinates_rejected(self):
        with pytest.raises(ValueError, match="Duplicate builder cell"):
            GameConfig.from_builder([
                {"x": 1, "y": 1, "kind": "food"},
                {"x": 1, "y": 1, "kind": "obstacle"},
            ])

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError, match="Unknown cell kind"):
            GameConfig.from_builder([{"x": 1, "y": 1, "kind": "portal"}])

    def test_snake_follows_grid_and_direction(self):
        cfg = GameConfig.from_builder([], grid_size=8, initial_direction="down")
        assert cfg.initial_snake == ((4, 4), (4, 3), (4, 2))


class TestPersistence:
    def test_to_dict(self):
        d = GameConfig(initial_foods=[(1, 2)]).to_dict()
        assert d["initial_direction"] == "RIGHT"
        assert d["initial_foods"] == [[1, 2]]
        json.dumps(d)

    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(
            grid_size=12,
            initial_snake=[(4, 4), (4, 5)],
            initial_direction=Direction.UP,
            obstacles=[(0, 0)],
            initial_foods=[(7, 7)],
            ticks_per_second=5,
        )
        path = tmp_path / "sub" / "game.json"
        cfg.save(path)
        assert path.exists()
        assert GameConfig.load(path) == cfg
