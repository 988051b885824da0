# tests/test_tabular_q.py
from collections import Counter

import numpy as np
import pytest

from core.interfaces import Action, ItemType
from core.layouts import get_layout
from core.snake_rules import GameState, Rules
from rl.tabular_q import TabularQLearning


def make_agent(epsilon=0.0, gamma=0.9, alpha=0.5, seed=0):
    return TabularQLearning(4, epsilon, gamma, alpha, seed=seed)

def test_key_tokens(state_factory):
    st = state_factory(size=(3, 2), bodies=(((0, 0),),),
                       items=[(ItemType.APPLE, (2, 1))], walls=[(1, 1)])
    assert make_agent().encode_state(0, st) == "H,.,.,.,#,A"

def test_equal_states_share_a_key(cfg):
    layout = get_layout("small_arena_alone")
    a = GameState.from_layout(layout, 10)
    b = GameState.from_layout(layout, 10)
    agent = make_agent()
    assert agent.encode_state(0, a) == agent.encode_state(0, b)
    Rules(cfg).step(b, [Action.MOVE_DOWN])
    assert agent.encode_state(0, a) != agent.encode_state(0, b)

def test_body_order_is_part_of_the_key(state_factory):
    # same occupied cells, different segment order
    a = state_factory(bodies=([(2, 2), (3, 2), (3, 3), (2, 3)],))
    b = state_factory(bodies=([(2, 2), (2, 3), (3, 3), (3, 2)],))
    agent = make_agent()
    assert agent.encode_state(0, a) != agent.encode_state(0, b)

def test_other_snakes_in_key_alive_or_dead(state_factory):
    st = state_factory(bodies=(((1, 1),), ((5, 3), (5, 4))))
    agent = make_agent()
    key = agent.encode_state(0, st).split(",")
    assert "E1" in key and "e1.1" in key
    st.snakes[1].dead = True
    key = agent.encode_state(0, st).split(",")
    assert "E1" not in key
    assert "D1" in key and "d1.1" in key

def test_dead_rival_position_changes_key(state_factory):
    a = state_factory(bodies=(((1, 1),), ((5, 3), (5, 4))))
    b = state_factory(bodies=(((1, 1),), ((6, 0), (6, 1))))
    a.snakes[1].dead = b.snakes[1].dead = True
    agent = make_agent()
    assert agent.encode_state(0, a) != agent.encode_state(0, b)

def test_item_under_head_keeps_both(state_factory):
    apples = [(ItemType.APPLE, (1, 1)), (ItemType.APPLE, (5, 3))]
    a = state_factory(bodies=(((1, 1),),), items=apples)
    b = state_factory(bodies=(((5, 3),),), items=apples)
    agent = make_agent()
    assert agent.encode_state(0, a) != agent.encode_state(0, b)
    assert "H+A" in agent.encode_state(0, a).split(",")

def test_sick_snake_on_item_still_has_a_head(cfg, state_factory):
    st = state_factory(bodies=([(2, 2), (1, 2)],), items=[(ItemType.APPLE, (3, 2))])
    st.snakes[0].sick_timer = 3
    Rules(cfg).step(st, [Action.MOVE_RIGHT])
    key = make_agent().encode_state(0, st).split(",")
    assert key.count("H+A") == 1
    assert "b1" in key

def test_lazy_init_on_choose(state_factory):
    st = state_factory()
    agent = make_agent()
    assert agent.Q == {}
    agent.choose_action(0, st)
    q = agent.Q[agent.encode_state(0, st)]
    assert q.shape == (4,) and not q.any()

def test_greedy_is_deterministic_with_first_index_ties(state_factory):
    st = state_factory()
    agent = make_agent(epsilon=0.3)
    agent.set_train_mode(False)
    assert agent.epsilon == 0.0
    # all zeros: first index
    assert agent.choose_action(0, st) == Action.MOVE_UP
    agent.q_values(agent.encode_state(0, st))[:] = [0.0, 1.0, 1.0, 0.0]
    picks = {agent.choose_action(0, st) for _ in range(20)}
    assert picks == {Action.MOVE_DOWN}

def test_full_exploration_is_uniform(state_factory):
    st = state_factory()
    agent = make_agent(epsilon=1.0, seed=1)
    agent.q_values(agent.encode_state(0, st))[:] = [5.0, 0.0, 0.0, 0.0]
    counts = Counter(agent.choose_action(0, st) for _ in range(4000))
    assert set(counts) == set(Action)
    for a in Action:
        assert 800 < counts[a] < 1200

def test_converges_to_reward_with_zero_gamma(state_factory):
    st = state_factory()
    agent = make_agent(gamma=0.0, alpha=0.2)
    for _ in range(200):
        agent.update(0, st, Action.MOVE_LEFT, st, 3.0, False)
    q = agent.q_values(agent.encode_state(0, st))
    assert q[Action.MOVE_LEFT] == pytest.approx(3.0)
    assert agent.n_updates == 200

def test_terminal_drops_future_value(cfg, state_factory):
    st = state_factory()
    nxt = st.copy()
    Rules(cfg).step(nxt, [Action.MOVE_RIGHT])
    agent = make_agent(gamma=1.0, alpha=1.0)
    agent.q_values(agent.encode_state(0, nxt))[:] = [0.0, 5.0, 0.0, 0.0]

    agent.update(0, st, Action.MOVE_RIGHT, nxt, 1.0, True)
    assert agent.q_values(agent.encode_state(0, st))[Action.MOVE_RIGHT] == pytest.approx(1.0)

    agent.update(0, st, Action.MOVE_RIGHT, nxt, 1.0, False)
    assert agent.q_values(agent.encode_state(0, st))[Action.MOVE_RIGHT] == pytest.approx(6.0)

def test_update_touches_only_taken_action(state_factory):
    st = state_factory()
    agent = make_agent()
    agent.update(0, st, Action.MOVE_DOWN, st, 2.0, True)
    q = agent.q_values(agent.encode_state(0, st))
    np.testing.assert_allclose(q, [0.0, 1.0, 0.0, 0.0])
