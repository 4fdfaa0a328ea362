from apeisland.agent.core import ApeAgent
from apeisland.config import ApeConfig
from apeisland.world.island import IslandWorld, Outcome
from apeisland.world.objects import STAY, action_index
from apeisland.world.snapshot import nearest_of


def test_island_generation_counts():
    world = IslandWorld(ApeConfig(), seed=3)
    assert world.land.shape == (40, 50)
    assert len(world.trees) == 80 and len(world.rocks) == 55
    assert len(world.food) == 12 and len(world.predators) == 3
    assert not world.land[0, 0]
    for cell in world.trees | world.rocks:
        assert world.land[cell[1], cell[0]]


def test_seeded_worlds_match():
    a = IslandWorld(seed=11)
    b = IslandWorld(seed=11)
    assert a.trees == b.trees and a.rocks == b.rocks


def test_tick_drains_hunger_and_ages():
    world = IslandWorld(seed=0)
    agent = ApeAgent(world.config, pos=world.random_land_cell())
    world.tick(agent)
    assert agent.hunger == 100.0 - 0.8
    assert agent.age == 1


def test_eating_restores_hunger():
    world = IslandWorld(seed=0)
    world.predators = []
    agent = ApeAgent(world.config, pos=world.random_land_cell())
    agent.hunger = 30.0
    world.food = world.food[:1]
    world.food[0].x, world.food[0].y = agent.pos
    outcome = world.resolve(agent, STAY)
    assert outcome.ate and not outcome.died
    assert agent.hunger == 75.0
    assert agent.foods_eaten == 1
    assert outcome.reward == -0.02 + 1.2


def test_starvation_respawns():
    world = IslandWorld(seed=0)
    world.predators = []
    world.food = []
    agent = ApeAgent(world.config, pos=world.random_land_cell())
    agent.hunger = 0.0
    outcome = world.resolve(agent, STAY)
    assert outcome.died and outcome.cause == "starvation"
    assert outcome.reward == -0.02 - 1.5
    assert agent.hunger == 100.0 and agent.deaths == 1


def test_blocked_move_keeps_position():
    world = IslandWorld(seed=0)
    world.predators = []
    agent = ApeAgent(world.config, pos=world.random_land_cell())
    x, y = agent.pos
    world.rocks.add((x, y - 1))
    world.resolve(agent, action_index("up"))
    assert agent.pos == (x, y)


def test_nearest_of_first_wins_ties():
    found = nearest_of((0, 0), [(0, 2), (2, 0), (1, 1)])
    assert found.target == (0, 2) and found.distance == 2
    assert nearest_of((0, 0), []) is None


def test_food_spawn_waits_for_its_own_hook():
    config = ApeConfig(FOOD_SPAWN_INTERVAL=1, FOOD_SPAWN_CHANCE=1.0)
    world = IslandWorld(config, seed=0)
    world.predators = []
    world.food = []
    agent = ApeAgent(config, pos=world.random_land_cell())
    world.tick(agent)
    outcome = world.resolve(agent, STAY)
    assert world.food == []
    assert world.maybe_spawn_food(outcome)
    assert len(world.food) == 1


def test_no_food_spawn_on_death_or_off_interval():
    config = ApeConfig(FOOD_SPAWN_INTERVAL=6, FOOD_SPAWN_CHANCE=1.0)
    world = IslandWorld(config, seed=0)
    world.food = []
    world.tick_count = 6
    assert not world.maybe_spawn_food(Outcome(reward=-1.5, died=True))
    world.tick_count = 7
    assert not world.maybe_spawn_food(Outcome(reward=-0.02))
    world.tick_count = 12
    assert world.maybe_spawn_food(Outcome(reward=-0.02))
