import cv2
import mediapipe as mp
import numpy as np

from gesture_formation.Formations import ElementKind

mp_drawing = mp.solutions.drawing_utils
mp_styles = mp.solutions.drawing_styles

KIND_DOT = {
    ElementKind.SPHERE: 2,
    ElementKind.CUBE: 2,
    ElementKind.PHOTO: 6,
}


# ---------- camera preview ----------
def draw_hand_debug(frame, raw_landmarks):
    """Draw mediapipe landmarks + connections on the (mirrored) camera frame."""
    if raw_landmarks is None:
        return
    mp_drawing.draw_landmarks(
        frame,
        raw_landmarks,
        mp.solutions.hands.HAND_CONNECTIONS,
        mp_styles.get_default_hand_landmarks_style(),
        mp_styles.get_default_hand_connections_style(),
    )


# ---------- formation preview ----------
def _view_rvec_tvec(camera_pose):
    """World->camera transform for a camera at `position` looking at `look_at` (OpenCV axes)."""
    eye = np.asarray(camera_pose.position, dtype=np.float64)
    forward = np.asarray(camera_pose.look_at, dtype=np.float64) - eye
    norm = np.linalg.norm(forward)
    if norm <= 1e-6:
        forward = np.array([0.0, 0.0, -1.0])
    else:
        forward = forward / norm
    right = np.cross(forward, (0.0, 1.0, 0.0))
    if np.linalg.norm(right) <= 1e-6:
        right = np.array([1.0, 0.0, 0.0])
    right = right / np.linalg.norm(right)
    down = np.cross(forward, right)

    rot = np.vstack((right, down, forward))
    rvec, _ = cv2.Rodrigues(rot)
    tvec = -rot @ eye
    return rvec, tvec


def draw_formation(canvas, buffers, camera_pose, fov_deg=45.0):
    """
    Project every element's world position through the live camera pose and
    plot it as a dot in its own colour. Elements behind the camera are skipped.
    """
    h, w = canvas.shape[:2]
    focal = (h / 2) / np.tan(np.radians(fov_deg) / 2)
    camera_matrix = np.array([[focal, 0, w / 2], [0, focal, h / 2], [0, 0, 1]], np.float64)
    dist_coeffs = np.zeros((5, 1), np.float64)
    rvec, tvec = _view_rvec_tvec(camera_pose)
    rot, _ = cv2.Rodrigues(rvec)

    for kind, buf in buffers.items():
        if not len(buf):
            continue
        points = buf.matrices[:, :3, 3].astype(np.float64)
        depth = (points @ rot.T + tvec)[:, 2]
        visible = depth > 0.1
        if not visible.any():
            continue
        pts2d, _ = cv2.projectPoints(points[visible], rvec, tvec, camera_matrix, dist_coeffs)
        colors = (buf.colors[visible][:, ::-1] * 255).astype(int)
        for (x, y), color in zip(pts2d.reshape(-1, 2), colors):
            if 0 <= x < w and 0 <= y < h:
                cv2.circle(canvas, (int(x), int(y)), KIND_DOT[kind], tuple(int(c) for c in color), -1)


def draw_hud(canvas, mode, gesture, fps=None, photos=0):
    lines = [
        f"mode: {mode.value}",
        f"gesture: {gesture.value}",
        f"photos: {photos}",
    ]
    if fps is not None:
        lines.append(f"FPS: {fps:.1f}")
    for i, line in enumerate(lines):
        cv2.putText(
            canvas,
            line,
            (10, 30 + i * 24),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.6,
            (55, 175, 212),
            1,
            cv2.LINE_AA,
        )


def compose_preview(camera_frame, buffers, camera_pose, mode, gesture, fps, photos, size=(960, 540)):
    """Formation view with the camera feed as a picture-in-picture thumbnail."""
    w, h = size
    canvas = np.full((h, w, 3), 5, dtype=np.uint8)
    draw_formation(canvas, buffers, camera_pose)
    if camera_frame is not None:
        thumb_w = w // 4
        thumb_h = int(camera_frame.shape[0] * thumb_w / camera_frame.shape[1])
        thumb = cv2.resize(camera_frame, (thumb_w, thumb_h))
        canvas[h - thumb_h - 10 : h - 10, w - thumb_w - 10 : w - 10] = thumb
    draw_hud(canvas, mode, gesture, fps=fps, photos=photos)
    return canvas
