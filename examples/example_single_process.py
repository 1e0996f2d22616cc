"""
Example: tricubic interpolation of a field sampled on a 3D grid.
"""

import numpy as np
from tricubic3d import TricubicInterpolator

# Define the grid size along each axis
Nx, Ny, Nz = 30, 32, 34

# Define coordinate arrays for the regular grid
cx = np.linspace(0, 1, Nx, endpoint=True)
cy = np.linspace(0, 2, Ny, endpoint=True)
cz = np.linspace(0, 3, Nz, endpoint=True)

# Create a smooth synthetic 3D scalar field on the grid
X, Y, Z = np.meshgrid(cx, cy, cz, indexing="ij")
data = np.sin(2 * X) * np.cos(Y) * np.exp(-0.2 * Z)

# Generate random query points within the domain bounds
num_points = 10
points = np.random.uniform(
    low=[0, 0, 0], high=[1, 2, 3], size=(num_points, 3)
)

# --- Phase 1: Build the interpolating function ---
# Derivatives are estimated by central differences
interp = TricubicInterpolator(method="finite", num_threads=2).interpolate(
    (cx, cy, cz), data
)

# --- Phase 2: Evaluate values and gradients at query points ---
values, gradients = interp(points, nu=1)

print()
print("Tricubic interpolation:")
print(f"{'Index':>8} | {'Value':>12} | {'df/dx':>12}")
for i, (val, grad) in enumerate(zip(values, gradients)):
    print(f"{i:8d} | {val:12.6f} | {grad[0]:12.6f}")
