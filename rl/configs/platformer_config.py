"""
Rollout configuration for the platformer environment
"""

# Environment parameters
ENV_CONFIG = {
    "variant": "kaboom",
    "level": "level1",
    "max_steps": 1800,  # 30 seconds at 60 FPS
    "k_enemies": 3,
    "progress_scale": 1.0,
    "time_penalty": 0.001,
}

# ==============================================================================
# POLICIES
# Scripted policies for headless rollouts. Each maps to fixed action
# probabilities: P(move=left), P(move=right), P(jump)
# ==============================================================================

POLICY_CONFIGS = {
    "random": {"description": "Uniform random actions"},
    "runner": {
        "description": "Mostly run right, jump now and then",
        "p_left": 0.05,
        "p_right": 0.85,
        "p_jump": 0.1,
    },
    "hopper": {
        "description": "Stand still and keep jumping",
        "p_left": 0.0,
        "p_right": 0.0,
        "p_jump": 1.0,
    },
}

ROLLOUT_CONFIG = {
    "seeds": [42, 123, 456],
    "n_episodes": 5,
    "log_dir": "./logs",
}
