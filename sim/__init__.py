"""
sim — Simulation core
=====================

Modules
-------
world
    :class:`World` road simulation, spawn logic and physics tick.
traffic_policy
    :class:`FollowingPolicy` model constants and the car-following rules.
rwlock
    :class:`ReadWriteLock` guarding the world.
sim_bridge
    :class:`SimBridge` ticker and broadcaster threads.
physics
    Low-level unit conversion and kinematics helpers.
"""
