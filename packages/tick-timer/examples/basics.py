"""Timers in a frame loop -- the host calls update(dt) once per frame.

Demonstrates:
- One-shot delays, repeats, and per-frame progress callbacks
- Frame-count timers that ignore dt
- Waiting on a condition with a timeout
- Binding timers to an owner and tearing the owner down
- Slowing game time while real-time timers keep pace

Run: python -m examples.basics
"""

from tick_timer import LifecycleOwner, Scheduler

FPS = 10
DT = 1.0 / FPS


def main() -> None:
    print("=== tick-timer basics ===\n")

    scheduler = Scheduler()
    frame = 0
    door = {"open": False}

    scheduler.delay(0.5, lambda: print(f"  frame {frame}: half a second passed"))
    scheduler.repeat(0.3, lambda: print(f"  frame {frame}: ping"), repeat_count=3)
    scheduler.delay_ticks(4, lambda: print(f"  frame {frame}: four frames later"))
    scheduler.progress(
        1.0,
        lambda p: print(f"  frame {frame}: loading {p:4.0%}"),
        lambda: door.update(open=True),
    )
    scheduler.wait_until(
        lambda: door["open"],
        lambda: print(f"  frame {frame}: the door is open"),
        timeout=5.0,
    )

    # Everything bound to the scene stops when the scene ends.
    scene = LifecycleOwner("intro")
    scheduler.repeat(0.2, lambda: print(f"  frame {frame}: scene tick"), owner=scene)
    scheduler.delay(0.7, scene.teardown)

    # Slow motion: game time halves, the real-time banner is unaffected.
    scheduler.delay(1.2, lambda: setattr(scheduler, "time_scale", 0.5))
    scheduler.delay(2.0, lambda: print(f"  frame {frame}: game clock hit 2.0"))
    scheduler.delay(
        2.0,
        lambda: print(f"  frame {frame}: real clock hit 2.0"),
        real_time=True,
    )

    while scheduler.active_count and frame < 60:
        frame += 1
        scheduler.update(DT)

    print(f"\nDone after {frame} frames, {scheduler.active_count} timers left.")
    scheduler.close()


if __name__ == "__main__":
    main()
