"""Finding the robot models advertised on the topic graph."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

DESCRIPTION = "robot_description"
POSE_TYPE = "geometry_msgs/msg/Pose"

TopicTypes = Mapping[str, Sequence[str]] | Iterable[tuple[str, Sequence[str]]]


@dataclass(frozen=True)
class ModelRequest:
    """A model to load: from a namespace's description or from a world file."""

    namespace: str = ""
    pose_topic: str = ""
    world_model: str = ""

    @property
    def loads_world(self) -> bool:
        """Whether the model comes from a world description file."""
        return bool(self.world_model)


def is_description_topic(topic: str) -> bool:
    """Whether the topic name ends with ``robot_description``."""
    return topic.endswith(DESCRIPTION)


def _items(topics: TopicTypes) -> list[tuple[str, Sequence[str]]]:
    if isinstance(topics, Mapping):
        return list(topics.items())
    return list(topics)


def find_models(topics: TopicTypes) -> list[ModelRequest]:
    """One request per description topic, with its pose topic if published.

    The pose topic is the first topic of the same namespace whose first type
    is a pose, given relative to the namespace.
    """
    items = _items(topics)
    requests = []
    for topic, _types in items:
        if not is_description_topic(topic):
            continue
        length = len(topic) - len(DESCRIPTION) - 1
        namespace = topic if length < 0 else topic[:length]
        pose = next(
            (
                name
                for name, types in items
                if name.startswith(namespace) and len(types) > 0 and types[0] == POSE_TYPE
            ),
            None,
        )
        if pose is None:
            requests.append(ModelRequest(namespace))
        else:
            requests.append(ModelRequest(namespace, pose[len(namespace) + 1 :]))
    return requests


def spawn_request(robot_namespace: str = "", pose_topic: str = "", world_model: str = "") -> ModelRequest | None:
    """Request for a spawn call; None when every advertised model should be found."""
    if not robot_namespace and not world_model:
        return None
    return ModelRequest(robot_namespace, pose_topic, world_model)