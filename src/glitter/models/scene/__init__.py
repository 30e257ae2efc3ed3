"""Scene engine package"""

from .core import Scene
from .runtime_layer import RuntimeLayer
from .layer_mixin import SceneLayerMixin
from .component_mixin import SceneComponentMixin
from .render_mixin import SceneRenderMixin

__all__ = [
    'Scene',
    'RuntimeLayer',
    'SceneLayerMixin',
    'SceneComponentMixin',
    'SceneRenderMixin',
]
