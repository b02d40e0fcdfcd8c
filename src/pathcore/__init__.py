"""Light-transport and shading core of a Taichi path tracer.

This package computes the per-bounce physics of unidirectional path
tracing: camera ray generation, vector algebra and the material scattering
model (Lambertian diffuse, fuzzy metal and dielectric glass).

Scene storage, intersection search, the recursive color integrator and image
output belong to the caller. They hand this package a HitRecord and receive
an attenuation color and an outgoing ray.

Subpackages:
    core: Rays, vector utilities, random sampling and hit records
    camera: Thin-lens camera with depth of field
    materials: Material kinds, scatter dispatch and description decoding

Modules:
    config: Render and camera configuration loading
"""

__version__ = "0.1.0"
