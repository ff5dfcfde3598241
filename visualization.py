# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.

The simulation lives in a fixed logical domain; everything here maps that
domain onto whatever size the window currently has, so resizing rescales
the drawing without touching simulation state.
"""
import logging
import pygame
import numpy as np
from typing import Any, Dict, Iterable, List, Optional, Tuple
from particle import Particle
from utils import linear_scale
from constants import (
    BACKGROUND_COLOR, DEFAULT_PARTICLE_RADIUS, DOMAIN_HALF_EXTENT,
    FALLBACK_PARTICLE_COLOR, FPS, PALETTE_SATURATION_RANGE,
    PALETTE_VALUE_RANGE, VIBRANT_COLORS, WINDOW_HEIGHT, WINDOW_WIDTH
)

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[Dict[str, Any]] = None):
#     - Inputs:
#       - vis_params: "window_width", "window_height", "fps",
#         "particle_radius", "background_color", "particle_colors",
#         "resizable".
#     - Side Effects: Initializes Pygame and creates a display surface.
#       Raises pygame.error if the window cannot be created.
#
#   - draw(self, particles: Iterable[Particle]) -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders particles to the screen and handles Pygame events.
#
# render(surface, particles, half_extent, radius, background) -> None:
#   - Side Effects: Clears `surface` and draws one filled circle per particle.

Color = Tuple[int, int, int]


def generate_palette(count: int, rng: np.random.Generator) -> List[Color]:
    """Generates `count` colors with random hues and high saturation/value."""
    hues = rng.uniform(0.0, 360.0, size=count)
    saturations = rng.uniform(*PALETTE_SATURATION_RANGE, size=count)
    values = rng.uniform(*PALETTE_VALUE_RANGE, size=count)
    colors = []
    for h, s, v in zip(hues, saturations, values):
        color = pygame.Color(0)
        color.hsva = (float(h), float(s), float(v), 100.0)
        colors.append((color.r, color.g, color.b))
    return colors


def resolve_palette(
    count: int, rng: np.random.Generator, config_colors: Optional[list] = None
) -> List[Color]:
    """
    Uses the colors from config when present, padding a short list from the
    vibrant default palette. Without config colors, generates a palette.
    """
    def get_default_colors(n):
        return [VIBRANT_COLORS[i % len(VIBRANT_COLORS)] for i in range(n)]

    if not config_colors:
        logging.info(f"No colors found in config. Generating a palette of {count} colors.")
        return generate_palette(count, rng)

    final_colors = []
    try:
        for rgb in config_colors:
            color = pygame.Color(rgb)
            final_colors.append((color.r, color.g, color.b))
    except (ValueError, TypeError) as e:
        logging.error(f"Could not parse colors from config due to invalid format: {e}. Falling back to vibrant default palette.")
        return get_default_colors(count)

    num_loaded = len(final_colors)
    if num_loaded < count:
        logging.warning(
            f"Config provides {num_loaded} colors, but {count} are needed. "
            f"Generating the remaining {count - num_loaded} using the default palette."
        )
        final_colors.extend(get_default_colors(count)[num_loaded:])
    elif num_loaded > count:
        logging.warning(
            f"Config provides {num_loaded} colors, but only {count} are needed. "
            "Ignoring excess colors."
        )
        final_colors = final_colors[:count]
    else:
        logging.info(f"Successfully loaded {num_loaded} particle colors from configuration.")

    return final_colors


def render(
    surface: pygame.Surface,
    particles: Iterable[Particle],
    half_extent: float = DOMAIN_HALF_EXTENT,
    radius: float = DEFAULT_PARTICLE_RADIUS,
    background: Color = BACKGROUND_COLOR,
) -> None:
    """
    Draws every particle onto `surface`, scaled to the surface's current size.

    Pixel space is centered on the surface with y pointing up.
    """
    width, height = surface.get_size()
    width_scale = linear_scale((-half_extent, half_extent), (-width / 2, width / 2))
    height_scale = linear_scale((-half_extent, half_extent), (-height / 2, height / 2))

    surface.fill(background)
    for particle in particles:
        x, y = particle.position.as_tuple()
        color = particle.color if particle.color is not None else FALLBACK_PARTICLE_COLOR
        center = (width / 2 + width_scale(x), height / 2 - height_scale(y))
        pygame.draw.circle(surface, color, center, radius)


class Visualizer:
    """
    Opens the window and redraws the particle field once per frame.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None, half_extent: float = DOMAIN_HALF_EXTENT):
        """
        Initializes Pygame and the display window.
        """
        self.params = vis_params if vis_params is not None else {}
        self.half_extent = half_extent
        self.fps = self.params.get('fps', FPS)
        self.radius = float(self.params.get('particle_radius', DEFAULT_PARTICLE_RADIUS))
        self.background_color = tuple(self.params.get('background_color', BACKGROUND_COLOR))
        self.config_colors = self.params.get('particle_colors')

        pygame.init()

        width = self.params.get('window_width', WINDOW_WIDTH)
        height = self.params.get('window_height', WINDOW_HEIGHT)
        flags = pygame.RESIZABLE if self.params.get('resizable', True) else 0
        self.screen = pygame.display.set_mode((width, height), flags)

        pygame.display.set_caption("Particle Field")
        self.clock = pygame.time.Clock()

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def palette(self, count: int, rng: np.random.Generator) -> List[Color]:
        """Palette callable handed to the ParticleSystem."""
        return resolve_palette(count, rng, self.config_colors)

    def draw(self, particles: Iterable[Particle]) -> bool:
        """
        Draws all particles and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False
            if event.type == pygame.VIDEORESIZE:
                logging.debug(f"Window resized to {event.w}x{event.h}.")

        render(
            self.screen, particles,
            half_extent=self.half_extent,
            radius=self.radius,
            background=self.background_color,
        )

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
