"""Materials module for surface scattering.

This module implements the material model of the path tracer:

Components:
    lambertian: Diffuse reflection around the surface normal
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like materials with refraction and reflection
    material: Material registry and the scatter dispatch function
    description: Decoding of key-value material descriptions

Each scatter function takes the incoming ray and the hit record and returns
(did_scatter, attenuation, scattered). The recursive path walk that consumes
these results belongs to the caller.
"""

from .description import (
    UnrecognizedMaterialError,
    material_from_description,
    material_to_description,
    materials_from_descriptions,
)
from .dielectric import (
    DielectricMaterial,
    incidence,
    reflectance,
    scatter_dielectric,
    will_reflect,
)
from .lambertian import (
    LambertianMaterial,
    scatter_lambertian,
    scatter_lambertian_offset,
)
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialKind,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
    get_material_info,
    scatter,
    scatter_hit,
)
from .metal import (
    MetalMaterial,
    scatter_metal,
)

__all__ = [
    # Lambertian
    "LambertianMaterial",
    "scatter_lambertian",
    "scatter_lambertian_offset",
    # Metal
    "MetalMaterial",
    "scatter_metal",
    # Dielectric
    "DielectricMaterial",
    "scatter_dielectric",
    "incidence",
    "reflectance",
    "will_reflect",
    # Registry and dispatch
    "MAX_MATERIALS",
    "Material",
    "MaterialKind",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
    "get_material_info",
    "scatter",
    "scatter_hit",
    # Descriptions
    "UnrecognizedMaterialError",
    "material_from_description",
    "materials_from_descriptions",
    "material_to_description",
]
