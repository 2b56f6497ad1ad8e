"""
IoU matching of extracted regions against ground-truth boxes.
"""

import argparse
import json
from typing import Dict, List, Sequence, Tuple

from stickers.region import ExtractedRegion, RawBounds


def _as_box(r) -> Tuple[int, int, int, int]:
    if isinstance(r, RawBounds):
        return (r.min_x, r.min_y, r.w, r.h)
    if isinstance(r, ExtractedRegion):
        return r.to_bbox()
    if isinstance(r, dict):
        return (int(r["x"]), int(r["y"]), int(r["w"]), int(r["h"]))
    return tuple(r)


def iou(a, b) -> float:
    ax, ay, aw, ah = _as_box(a)
    bx, by, bw, bh = _as_box(b)
    inter_w = max(0, min(ax + aw, bx + bw) - max(ax, bx))
    inter_h = max(0, min(ay + ah, by + bh) - max(ay, by))
    inter = inter_w * inter_h
    if inter == 0:
        return 0.0
    ua = aw * ah + bw * bh - inter
    return inter / max(1, ua)


def greedy_match(preds: Sequence, gts: Sequence, iou_thr: float) -> Tuple[List[int], List[int]]:
    matches_pred = [-1] * len(preds)
    matches_gt = [-1] * len(gts)
    # sort pairs by IoU desc
    pairs = []
    for i, p in enumerate(preds):
        for j, g in enumerate(gts):
            s = iou(p, g)
            if s >= iou_thr:
                pairs.append((s, i, j))
    pairs.sort(reverse=True, key=lambda x: x[0])
    for _, i, j in pairs:
        if matches_pred[i] == -1 and matches_gt[j] == -1:
            matches_pred[i] = j
            matches_gt[j] = i
    return matches_pred, matches_gt


def evaluate_regions(preds: Sequence, gts: Sequence, iou_thr: float = 0.5) -> Dict[str, float]:
    mp, mg = greedy_match(preds, gts, iou_thr)
    tp = sum(1 for m in mp if m != -1)
    fp = sum(1 for m in mp if m == -1)
    fn = sum(1 for m in mg if m == -1)
    prec = tp / (tp + fp + 1e-9)
    rec = tp / (tp + fn + 1e-9)
    f1 = 2 * prec * rec / (prec + rec + 1e-9)
    return {"precision": prec, "recall": rec, "f1": f1, "tp": tp, "fp": fp, "fn": fn}


def evaluate_one(pred_json: str, gt_json: str, iou_thr: float) -> Dict[str, float]:
    with open(pred_json) as f:
        preds = json.load(f)
    with open(gt_json) as f:
        gts = json.load(f)
    return evaluate_regions(preds, gts, iou_thr)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--pred", type=str, required=True, help="pred json file")
    parser.add_argument("--gt", type=str, required=True, help="gt json file")
    parser.add_argument("--iou", type=float, default=0.5)
    args = parser.parse_args()

    res = evaluate_one(args.pred, args.gt, args.iou)
    print(json.dumps(res, indent=2))


if __name__ == "__main__":
    main()
