# main.py
"""
Main entry point for the Particle Field simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json` (or the path given as argv[1]).
2. Initializes the logging system.
3. Opens the window and sets up the particles.
4. Runs the frame-driven loop, stepping the simulation on a fixed cadence.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config, validate_config
import cProfile
import pstats
import io

def main():
    """
    The main function to run the simulation.
    """
    config_path = sys.argv[1] if len(sys.argv) > 1 else 'config.json'

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        sys.exit(1)

    setup_logging(config)

    logging.info("--- Particle Field Simulation Starting ---")

    try:
        validate_config(config)
    except ValueError:
        sys.exit(1)

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    import pygame
    from particle import ParticleSystem
    from simulation import Simulation
    from visualization import Visualizer
    from constants import DOMAIN_HALF_EXTENT

    # --- Component Initialization ---
    # 1. The window comes first; failing to create it is fatal.
    try:
        visualizer = Visualizer(
            vis_params,
            half_extent=sim_params.get('domain_half_extent', DOMAIN_HALF_EXTENT)
        )
    except pygame.error as e:
        logging.critical(f"FATAL: Could not create the display window. Error: {e}")
        pygame.quit()
        sys.exit(1)

    # 2. Particles take their colors from the visualizer's palette.
    particles = ParticleSystem(sim_params, palette=visualizer.palette)
    sim = Simulation(particles, sim_params)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = run_params.get('log_throttle_steps', 100)
    max_steps = run_params.get('max_steps', 0) # 0 runs until the window closes

    running = True
    if profiler:
        profiler.enable()
    while running:
        if sim.maybe_step():
            # Hot loops must throttle logs
            if sim.step_count % log_throttle == 0:
                logging.info(f"Simulation step {sim.step_count}")
                logging.debug(f"Step {sim.step_count} | Average Speed: {sim.mean_speed():.4f}")

            if max_steps and sim.step_count >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                running = False

        if running and not visualizer.draw(particles):
            running = False
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Field Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
