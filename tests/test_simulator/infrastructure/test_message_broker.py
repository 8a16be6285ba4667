import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
import simpy

from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeEnvironment


def test_subscriber_receives_published_message():
    env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)
    received = []

    def listener():
        message = yield broker.get("car/crash")
        received.append((env.now, message))

    def publisher():
        yield env.timeout(1.0)
        broker.put("car/crash", {"reason": "ROOF COLLISION"})

    env.process(listener())
    env.process(publisher())
    env.run()

    assert received == [(1.0, {"reason": "ROOF COLLISION"})]


def test_broadcast_pipe_sees_every_topic():
    env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)

    broker.put("serial/rx", "M_UP")
    broker.put("car/status", {"tick": 1})
    env.run()

    items = broker.get_broadcast_pipe().items
    assert [item["topic"] for item in items] == ["serial/rx", "car/status"]
    # No subscriber, so no topic pipe was created
    assert broker.topics == {}


def test_quiet_topics_not_echoed(capsys):
    env = simpy.Environment()
    broker = MessageBroker(env)

    broker.put("car/status", {"tick": 1})
    broker.put("car/sensor", {"sensor": 0})

    out = capsys.readouterr().out
    assert "car/status" not in out
    assert "[Broker] Publish on 'car/sensor'" in out


def test_realtime_environment_without_pacing_matches_simpy():
    env = RealtimeEnvironment(speed_factor=0.0)
    ticks = []

    def ticker():
        while True:
            yield env.timeout(0.016)
            ticks.append(env.now)

    env.process(ticker())
    env.run(until=0.1)

    assert len(ticks) == 6
    assert env.get_speed() == 0.0


def test_realtime_environment_rejects_negative_speed():
    with pytest.raises(ValueError):
        RealtimeEnvironment(speed_factor=-1.0)

    env = RealtimeEnvironment(speed_factor=1.0)
    with pytest.raises(ValueError):
        env.set_speed(-0.5)
