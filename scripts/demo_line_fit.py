"""
Synthetic line-fitting demo.

Points are scattered roughly along the image diagonal, RANSAC fits a line,
inliers are drawn green and the best line red. The canvas is written to disk.
"""

import time
from pathlib import Path

import cv2
import numpy as np

from gransac import Estimator, Line2DModel, Point2D, setup_logger


def draw_full_line(img: np.ndarray, model: Line2DModel, color: tuple[int, int, int], width: int) -> None:
    # extend the fitted line across the whole canvas
    w = img.shape[1]
    p = (0, int(round(model.intercept)))
    q = (w, int(round(model.slope * w + model.intercept)))
    cv2.line(img, p, q, color, width, cv2.LINE_8)


def main(side: int = 1000, n_points: int = 500, out_path: str = "LineFitting.png") -> None:
    setup_logger()
    rng = np.random.default_rng(0)

    canvas = np.full((side, side, 3), 255, dtype=np.uint8)
    radius = max(1, side // 100)

    # Diagonal points, perturbed
    diag = rng.integers(0, side, size=n_points)
    xy = np.floor(diag[:, None] + rng.normal(0.0, 25.0, size=(n_points, 2)))
    points = [Point2D(float(x), float(y)) for x, y in xy]
    for p in points:
        cv2.circle(canvas, (int(p.x), int(p.y)), radius, (0, 0, 0), -1)

    estimator = Estimator(Line2DModel, seed=42)
    estimator.initialize(threshold=20.0, max_iterations=100)

    start = time.perf_counter()
    ok = estimator.estimate(points)
    print(f"RANSAC took: {(time.perf_counter() - start) * 1000.0:.2f} ms.")
    if not ok:
        print("RANSAC failed:", estimator.last_error)
        return

    for p in estimator.get_best_inliers():
        cv2.circle(canvas, (int(p.x), int(p.y)), radius, (0, 255, 0), -1)

    best = estimator.get_best_model()
    draw_full_line(canvas, best, (0, 0, 255), 2)

    result = estimator.best_result
    print("model:", best)
    print("num_inliers:", result.num_inliers, "/", len(points))
    print("inlier_fraction:", result.inlier_fraction)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(out_path, canvas)
    print("saved:", out_path)


if __name__ == "__main__":
    main()
