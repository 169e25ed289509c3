"""Cook-Torrance microfacet BRDF.

For a hit with normal N, view vector V and light vector L (all unit length)
and half vector H = normalize(V + L):

    alpha = roughness^2
    D = alpha^2 / (pi * ((N.H)^2 (alpha^2 - 1) + 1)^2)          (GGX)
    k = (roughness + 1)^2 / 8
    G1(x) = x / (x (1 - k) + k)
    G = G1(N.V) * G1(N.L)                                       (Smith)
    F0 = mix(vec3(0.04), albedo, metalness)
    F = F0 + (1 - F0) (1 - H.V)^5                               (Schlick)
    specular = D G F / (4 max(N.V, 0) max(N.L, 0) + 0.001)
    kD = (1 - F)(1 - metalness)

and the reflected radiance from a point light of color C at distance d is

    (kD albedo / pi + specular) * C / d^2 * max(N.L, 0)

``energy_split`` exposes ``kD * albedo + F``, which stays at or below one
for parameters in [0, 1].
"""

import taichi as ti
import taichi.math as tm

from raykernel.config import SPECULAR_GUARD

vec3 = tm.vec3

# Reflectance at normal incidence of a typical dielectric
DIELECTRIC_F0 = 0.04

# Floor on the GGX denominator; only reached for roughness 0 with N == H
_GGX_DENOM_FLOOR = 1e-7


@ti.func
def distribution_ggx(n_dot_h: ti.f32, roughness: ti.f32) -> ti.f32:
    """GGX / Trowbridge-Reitz normal distribution."""
    alpha = roughness * roughness
    alpha2 = alpha * alpha
    d = n_dot_h * n_dot_h * (alpha2 - 1.0) + 1.0
    return alpha2 / tm.max(tm.pi * d * d, _GGX_DENOM_FLOOR)


@ti.func
def geometry_schlick_ggx(x: ti.f32, k: ti.f32) -> ti.f32:
    """Schlick-GGX masking for one direction, x = max(N.dir, 0)."""
    return x / (x * (1.0 - k) + k)


@ti.func
def geometry_smith(n_dot_v: ti.f32, n_dot_l: ti.f32, roughness: ti.f32) -> ti.f32:
    """Smith shadowing-masking, product of both Schlick-GGX terms."""
    k = (roughness + 1.0) * (roughness + 1.0) / 8.0
    return geometry_schlick_ggx(n_dot_v, k) * geometry_schlick_ggx(n_dot_l, k)


@ti.func
def base_reflectance(albedo: vec3, metalness: ti.f32) -> vec3:
    """F0 = mix(0.04, albedo, metalness)."""
    return tm.mix(vec3(DIELECTRIC_F0), albedo, metalness)


@ti.func
def fresnel_schlick(cos_theta: ti.f32, f0: vec3) -> vec3:
    """Schlick's approximation of the Fresnel reflectance."""
    return f0 + (1.0 - f0) * ti.pow(tm.clamp(1.0 - cos_theta, 0.0, 1.0), 5.0)


@ti.func
def energy_split(albedo: vec3, metalness: ti.f32, h_dot_v: ti.f32) -> vec3:
    """Diffuse plus specular weights, kD * albedo + F.

    Args:
        albedo: Base color.
        metalness: Metalness in [0, 1].
        h_dot_v: Cosine between half vector and view vector.

    Returns:
        The per-channel sum of the diffuse weight times albedo and the
        Fresnel (specular) weight.
    """
    f = fresnel_schlick(h_dot_v, base_reflectance(albedo, metalness))
    k_d = (1.0 - f) * (1.0 - metalness)
    return k_d * albedo + f


@ti.func
def cook_torrance(
    normal: vec3,
    view_dir: vec3,
    light_dir: vec3,
    albedo: vec3,
    roughness: ti.f32,
    metalness: ti.f32,
) -> vec3:
    """Evaluate (kD albedo / pi + specular) * max(N.L, 0).

    Multiply by the light color over the squared light distance to get the
    reflected radiance.

    Args:
        normal: Unit surface normal N.
        view_dir: Unit vector from the hit point toward the viewer, V.
        light_dir: Unit vector from the hit point toward the light, L.
        albedo: Base color.
        roughness: Roughness in [0, 1].
        metalness: Metalness in [0, 1].

    Returns:
        The cosine-weighted BRDF value per channel.
    """
    half_vec = tm.normalize(view_dir + light_dir)
    n_dot_v = tm.max(tm.dot(normal, view_dir), 0.0)
    n_dot_l = tm.max(tm.dot(normal, light_dir), 0.0)
    n_dot_h = tm.max(tm.dot(normal, half_vec), 0.0)
    h_dot_v = tm.max(tm.dot(half_vec, view_dir), 0.0)

    d = distribution_ggx(n_dot_h, roughness)
    g = geometry_smith(n_dot_v, n_dot_l, roughness)
    f = fresnel_schlick(h_dot_v, base_reflectance(albedo, metalness))

    specular = (d * g * f) / (4.0 * n_dot_v * n_dot_l + SPECULAR_GUARD)
    k_d = (1.0 - f) * (1.0 - metalness)

    return (k_d * albedo / tm.pi + specular) * n_dot_l
