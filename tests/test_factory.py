"""Tests for factory module."""
from devsim.config import default_config
from devsim.entities import MarketState, ProjectStatus
from devsim.factory import EntityFactory
from devsim.state import SimulationState


def _make_factory(seed: int = 1):
    cfg = default_config()
    return EntityFactory(cfg), SimulationState.initial(cfg, seed=seed), cfg


class TestProjects:
    def test_bounds(self):
        factory, state, cfg = _make_factory()
        state.clock.sim_time = 50.0
        for _ in range(200):
            p = factory.generate_project(state)
            assert p.status is ProjectStatus.AVAILABLE
            assert 1 <= p.difficulty <= 2  # company level 1
            assert p.deadline == 50.0 + 300.0 + 120.0 * p.difficulty
            assert p.reputation_reward == p.difficulty * 5
            assert p.reward > 0
            assert p.reward == int(p.reward)
            assert p.progress == 0.0
            assert p.features
            ptype = cfg.get_project_type(p.type)
            assert set(p.requirements) <= set(ptype.skills)
            for level in p.requirements.values():
                low = 20 + p.difficulty * 15
                assert low <= level <= low + 19

    def test_difficulty_grows_with_company_level(self):
        factory, state, _ = _make_factory()
        difficulties = {
            factory.generate_project(state, company_level=12).difficulty
            for _ in range(100)
        }
        assert difficulties <= {4, 5}
        assert 5 in difficulties

    def test_reward_scales_with_demand(self):
        factory_a, state_a, _ = _make_factory(seed=3)
        factory_b, state_b, _ = _make_factory(seed=3)
        low = factory_a.generate_project(state_a, market=MarketState(demand_multiplier=0.5))
        high = factory_b.generate_project(state_b, market=MarketState(demand_multiplier=2.0))
        assert high.reward > low.reward

    def test_ids_unique(self):
        factory, state, _ = _make_factory()
        ids = [factory.generate_project(state).id for _ in range(50)]
        assert len(set(ids)) == 50


class TestDevelopers:
    def test_bounds(self):
        factory, state, cfg = _make_factory()
        for _ in range(200):
            d = factory.generate_developer(state)
            assert set(d.skills) == set(cfg.skills)
            assert 50 <= d.skills[d.specialty] <= 79
            for skill, value in d.skills.items():
                if skill != d.specialty:
                    assert 10 <= value <= 49
            mean = sum(d.skills.values()) / len(d.skills)
            assert d.level == int(mean // 20) + 1
            assert 3000 + d.level * 1000 <= d.salary <= 3000 + d.level * 1000 + 1999
            assert d.energy == 100.0
            assert d.mood == 80.0
            assert d.stress == 20.0
            assert d.assigned_project_id is None
            assert not d.burnout_risk


def test_same_seed_same_entities():
    factory_a, state_a, _ = _make_factory(seed=42)
    factory_b, state_b, _ = _make_factory(seed=42)
    for _ in range(10):
        assert factory_a.generate_project(state_a) == factory_b.generate_project(state_b)
        assert factory_a.generate_developer(state_a) == factory_b.generate_developer(state_b)
