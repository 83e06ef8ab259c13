"""Material module for surface shading.

Components:
    phong: Phong reflectance (ambient, diffuse, specular, shininess)

A material's shininess is both its specular exponent and its mirror
reflectivity: reflected radiance is weighted by shininess divided by the
render configuration's reflectivity constant.
"""

from .phong import (
    MAX_MATERIALS,
    Material,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    get_phong_material,
    get_phong_material_count,
    phong_ambient,
    phong_diffuse,
    phong_specular,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "add_phong_material",
    "clear_phong_materials",
    "get_phong_material",
    "get_phong_material_count",
    "phong_ambient",
    "phong_diffuse",
    "phong_specular",
    "MAX_MATERIALS",
]
