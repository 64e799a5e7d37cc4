import threading
import time
from collections import deque
from queue import Empty, Full, Queue

import cv2

from gesture_formation.Config import ConfigWatcher
from gesture_formation.FormationProcessor import FormationProcessor
from gesture_formation.FormationServer import FormationServer
from gesture_formation.HandTracker import HandTracker
from gesture_formation.helpers import compose_preview, draw_hand_debug

# --------------------------------------------------------
# Queue for latest preview frame only (overwrite when full)
# --------------------------------------------------------
FRAME_QUEUE_MAX = 1
PREVIEW_WINDOW = "Formation Debug"


# --------------------------------------------------------
# CAPTURE THREAD
# --------------------------------------------------------
def capture_thread(slot, preview_queue, stop_event, cfg):
    """
    Camera -> mediapipe -> HandFrame, published into `slot` at whatever rate
    inference manages. A camera failure ends this thread only; the render
    loop keeps running on the neutral frame.
    """
    tcfg = cfg.get("tracker", {})
    cap = cv2.VideoCapture(tcfg.get("camera_index", 0))
    if not cap.isOpened():
        print("[CAMERA] ERROR: Cannot open camera, continuing without gestures")
        cap.release()
        return

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, tcfg.get("frame_width", 640))
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, tcfg.get("frame_height", 480))
    tracker = HandTracker(cfg)
    draw = cfg.get("debug", {}).get("draw_landmarks", True)

    print("[PY] Capture thread started.")
    try:
        while not stop_event.is_set():
            ok, frame = cap.read()
            if not ok:
                time.sleep(0.01)
                continue

            # inference runs on the unmirrored frame; HandFrame mirrors palm x itself
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            hand, raw = tracker.process_frame(rgb, time.time())
            if stop_event.is_set():
                # results that land after teardown are dropped
                break
            slot.publish(hand)

            if draw:
                draw_hand_debug(frame, raw)
            preview = cv2.flip(frame, 1)
            try:
                if preview_queue.full():
                    try:
                        preview_queue.get_nowait()  # remove older frame
                    except Empty:
                        pass
                preview_queue.put_nowait(preview)
            except Full:
                pass
    finally:
        tracker.close()
        cap.release()
        print("[PY] Capture thread exiting.")


# --------------------------------------------------------
# RENDER LOOP
# --------------------------------------------------------
def render_loop(processor, stop_event, cfg_watcher, server=None, preview_queue=None, headless=False):
    cfg = processor.cfg
    target_fps = cfg.get("loop", {}).get("target_fps", 60)
    frame_budget = 1.0 / max(target_fps, 1)
    debug_cfg = cfg.get("debug", {})
    show_preview = not headless and debug_cfg.get("show_preview", True)
    preview_size = (debug_cfg.get("preview_width", 960), debug_cfg.get("preview_height", 540))

    fps_times = deque(maxlen=debug_cfg.get("fps_window", 20))
    current_fps = None
    camera_frame = None
    start = time.time()

    if show_preview:
        cv2.namedWindow(PREVIEW_WINDOW, cv2.WINDOW_NORMAL)

    print("[PY] Render loop started.")
    while not stop_event.is_set():
        tick_start = time.time()

        new_cfg = cfg_watcher.check_reload()
        if new_cfg is not processor.cfg:
            processor.reconfigure(new_cfg)

        if server is not None:
            processor.handle_commands(server.poll_commands())

        processor.tick(tick_start - start)

        fps_times.append(tick_start)
        if len(fps_times) > 1:
            current_fps = (len(fps_times) - 1) / max(fps_times[-1] - fps_times[0], 1e-6)

        if server is not None:
            server.send_snapshot(processor.snapshot(fps=current_fps))

        if show_preview:
            try:
                camera_frame = preview_queue.get_nowait()
            except (Empty, AttributeError):
                pass
            canvas = compose_preview(
                camera_frame,
                processor.engine.buffers(),
                processor.camera_pose,
                processor.modes.mode,
                processor.modes.last_gesture,
                current_fps if debug_cfg.get("show_fps", True) else None,
                len(processor.engine.photos),
                size=preview_size,
            )
            cv2.imshow(PREVIEW_WINDOW, canvas)
            if cv2.waitKey(1) & 0xFF == 27:
                stop_event.set()
                break

        elapsed = time.time() - tick_start
        if elapsed < frame_budget:
            time.sleep(frame_budget - elapsed)

    if show_preview:
        cv2.destroyAllWindows()
    print("[PY] Render loop exiting.")


# --------------------------------------------------------
# MAIN ENTRY
# --------------------------------------------------------
def main(config_path="config.json", headless=False, overrides=None):
    cfg_watcher = ConfigWatcher(config_path, overrides=overrides)
    cfg = cfg_watcher.get_config()

    processor = FormationProcessor(cfg)
    stop_event = threading.Event()
    preview_queue = Queue(maxsize=FRAME_QUEUE_MAX)

    server = None
    ncfg = cfg.get("network", {})
    if ncfg.get("enabled", True):
        server = FormationServer(ncfg.get("pub_endpoint"), ncfg.get("cmd_endpoint"))

    cap_thread = threading.Thread(
        target=capture_thread,
        args=(processor.slot, preview_queue, stop_event, cfg),
        daemon=True,
    )
    cap_thread.start()

    try:
        render_loop(
            processor,
            stop_event,
            cfg_watcher,
            server=server,
            preview_queue=preview_queue,
            headless=headless,
        )
    except KeyboardInterrupt:
        pass
    finally:
        stop_event.set()
        processor.slot.close()
        cap_thread.join(timeout=1.0)
        if server is not None:
            server.close()

    print("[PY] Shutdown complete.")


if __name__ == "__main__":
    main()
