"""
Define Kubernetes manifests as a tree of Python constructs and synthesize them into deterministically ordered YAML
files. Dependencies can be declared between any two constructs; they are resolved into dependencies between the
individual objects and, where objects of different charts depend on each other, into an order of the charts.
"""

from konstrukt.apiobject import ApiObject, ObjectMetadata
from konstrukt.app import App
from konstrukt.chart import Chart
from konstrukt.dependency import declare_dependency
from konstrukt.include import Include
from konstrukt.synth import Synthesis, SynthesizedChart, synthesize
from konstrukt.toposort import CycleError
from konstrukt.tree import Construct
from konstrukt.writer import ManifestWriter, OutputType

__all__ = [
    "ApiObject",
    "App",
    "Chart",
    "Construct",
    "CycleError",
    "Include",
    "ManifestWriter",
    "ObjectMetadata",
    "OutputType",
    "Synthesis",
    "SynthesizedChart",
    "declare_dependency",
    "synthesize",
]
