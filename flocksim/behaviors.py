import numpy as np

from .agents import Kind
from .utils import distance, position_distance, within


# ---------- Classical flocking ----------

def fly_towards_center(agent, boids, params):
    """Cohesion: steer toward the centroid of the boids within visual range."""
    center = np.zeros((2,), dtype=float)
    n = 0
    for other in boids:
        if other is agent:
            continue
        if within(agent, other, params.visual_range):
            center += other.pos
            n += 1

    if n:
        center /= n
        agent.vel += (center - agent.pos) * params.coherence


def avoid_others(agent, boids, params, min_distance: float = 20.0):
    """Separation: push away from every boid closer than ``min_distance``."""
    move = np.zeros((2,), dtype=float)
    for other in boids:
        if other is agent:
            continue
        if within(agent, other, min_distance):
            move += agent.pos - other.pos

    agent.vel += move * params.separation


def match_velocity(agent, boids, params):
    """Alignment: steer toward the mean velocity of boids within visual range."""
    avg = np.zeros((2,), dtype=float)
    n = 0
    for other in boids:
        if other is agent:
            continue
        if within(agent, other, params.visual_range):
            avg += other.vel
            n += 1

    if n:
        avg /= n
        agent.vel += (avg - agent.vel) * params.alignment


# ---------- Hazards ----------

def avoid_predators(agent, predators, params, range_mult: float = 1.0):
    move = np.zeros((2,), dtype=float)
    for predator in predators:
        if within(agent, predator, params.visual_range * range_mult):
            move += agent.pos - predator.pos

    agent.vel += move * params.avoid_predator


def avoid_obstacles(agent, obstacles, params, strength: float = 20.0, eps: float = 1e-3):
    """
    Push away from obstacle centers. Every obstacle in range also adds
    ``strength / surface_distance`` to a shared gain, so the closer the agent
    is to any surface the harder it turns.
    """
    move = np.zeros((2,), dtype=float)
    gain = 0.0
    for obstacle in obstacles:
        d = distance(agent, obstacle)
        if d is None:
            continue
        surface = d - obstacle.r
        if surface < params.visual_range:
            move += agent.pos - obstacle.pos
            gain += strength / max(surface, eps)

    agent.vel += move * params.separation * gain


def pass_through_wind(agent, wind_zones):
    drift = np.zeros((2,), dtype=float)
    for zone in wind_zones:
        if within(agent, zone, zone.r):
            drift += zone.drift

    agent.vel += drift


# ---------- Leaders ----------

def fly_towards_leader(agent, leaders, params, range_mult: float = 3.0):
    # First leader in range wins, not the nearest one.
    for leader in leaders:
        if within(agent, leader, params.visual_range * range_mult):
            agent.vel += (leader.pos - agent.pos) * params.follow_leader
            return


def react_to_signal(agent, signals, params):
    """Add the broadcast velocity of every leader signal within visual range."""
    for signal in signals:
        if position_distance(agent.pos, signal.pos) < params.visual_range:
            agent.vel += signal.vel


# ---------- Predators ----------

def fly_towards_prey(predator, boids, params, range_mult: float = 1.5):
    center = np.zeros((2,), dtype=float)
    n = 0
    for prey in boids:
        if within(predator, prey, params.visual_range * range_mult):
            center += prey.pos
            n += 1

    if n:
        center /= n
        predator.vel += (center - predator.pos) * params.predation


def match_prey_velocity(predator, boids, params, range_mult: float = 1.5,
                        correction: float = 0.5):
    """Predators align with their prey, but more weakly than boids align with each other."""
    avg = np.zeros((2,), dtype=float)
    n = 0
    for prey in boids:
        if within(predator, prey, params.visual_range * range_mult):
            avg += prey.vel
            n += 1

    if n:
        avg /= n
        predator.vel += (avg - predator.vel) * params.alignment * correction


# ---------- Per-kind pipelines ----------

def steer_normal(agent, sim, params):
    cfg = sim.cfg
    fly_towards_center(agent, sim.boids, params)
    if params.use_leaders:
        fly_towards_leader(agent, sim.leaders, params, range_mult=cfg.boid_sees_leader_mult)
    avoid_others(agent, sim.boids, params, min_distance=cfg.min_separation)
    if params.use_predators:
        avoid_predators(agent, sim.predators, params)
    if params.use_leaders:
        react_to_signal(agent, sim.signal_channel.signals, params)
    match_velocity(agent, sim.boids, params)
    if params.use_obstacles:
        avoid_obstacles(agent, sim.obstacles, params)
        pass_through_wind(agent, sim.wind_zones)


def steer_predator(predator, sim, params):
    cfg = sim.cfg
    if params.use_predators:
        fly_towards_prey(predator, sim.boids, params, range_mult=cfg.predator_sees_boid_mult)
        match_prey_velocity(
            predator, sim.boids, params,
            range_mult=cfg.predator_sees_boid_mult,
            correction=cfg.predator_alignment_correction,
        )
    if params.use_obstacles:
        avoid_obstacles(predator, sim.obstacles, params)
        pass_through_wind(predator, sim.wind_zones)


def steer_leader(leader, sim, params):
    # Leaders spot predators from further away than ordinary boids
    if params.use_predators:
        avoid_predators(leader, sim.predators, params, range_mult=sim.cfg.leader_sees_predator_mult)
    fly_towards_center(leader, sim.boids, params)


PIPELINES = {
    Kind.NORMAL: steer_normal,
    Kind.PREDATOR: steer_predator,
    Kind.LEADER: steer_leader,
}


def apply_rules(agent, sim, params):
    PIPELINES[agent.kind](agent, sim, params)
