from .utils import clip_norm


def keep_within_bounds(agent, viewport, margin: float, turn: float):
    """
    Soft boundary: inside the margin band along an edge, nudge the velocity
    back toward the interior by ``turn``. Position is never clamped, so an agent
    moving fast enough can still leave the visible area for a while.
    """
    x, y = agent.pos
    if x < margin:
        agent.vel[0] += turn
    if x > viewport.width - margin:
        agent.vel[0] -= turn
    if y < margin:
        agent.vel[1] += turn
    if y > viewport.height - margin:
        agent.vel[1] -= turn


def limit_speed(agent, limit: float):
    agent.vel = clip_norm(agent.vel, limit)


def advance(agent):
    """
    Point-mass update, one unit of time per tick:
      p <- p + v
    then record p in the (bounded) trail.
    """
    agent.pos = agent.pos + agent.vel
    agent.history.append((float(agent.pos[0]), float(agent.pos[1])))


def integrate(agent, speed_limit: float):
    limit_speed(agent, speed_limit)
    advance(agent)
