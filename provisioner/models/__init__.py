"""Data models."""

from .placeholder import Placeholder
from .record import BroadcastAssignment, FanOutPlan, FilledTaskRecord
from .task import CarouselContent, CarouselSlide, DraftTask, TaskValue
from .template import ContainerNode, DynamicNode, LeafNode, Project, Template
from .worker import Worker

__all__ = [
    "BroadcastAssignment",
    "CarouselContent",
    "CarouselSlide",
    "ContainerNode",
    "DraftTask",
    "DynamicNode",
    "FanOutPlan",
    "FilledTaskRecord",
    "LeafNode",
    "Placeholder",
    "Project",
    "TaskValue",
    "Template",
    "Worker",
]
