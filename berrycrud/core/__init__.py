"""Building blocks shared by the resolver factories.

Submodules are imported directly (``from berrycrud.core.filters import ...``); this
package keeps no eager imports so that model modules can depend on
``berrycrud.core.errors`` without pulling in Strawberry type synthesis.
"""
