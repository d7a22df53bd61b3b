"""Command line entry point for the traffic analytics pipeline."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from traffic_analytics import AnalysisConfig, AnalysisSession, SummaryReport
from traffic_analytics.export import export_filename, save_log, summary_to_dict
from traffic_analytics.scenarios import load_predefined_scenarios

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--mode", choices=["video", "simulation"], default="simulation")
    parser.add_argument("--video", help="Video file to analyse (video mode)")
    parser.add_argument("--model", default="yolov8n.pt", help="YOLO weights or model name")
    parser.add_argument("--confidence", type=float, default=0.5, help="Detection confidence threshold")
    parser.add_argument("--iou", type=float, default=0.45, help="Detector IoU threshold")
    parser.add_argument("--frame-skip", type=int, default=3, help="Analyse every Nth frame")
    parser.add_argument("--max-frames", type=int, help="Stop after reading this many frames")
    parser.add_argument(
        "--scenario",
        choices=[scenario.name for scenario in load_predefined_scenarios()],
        default="sudden-surge",
        help="Predefined scenario (simulation mode)",
    )
    parser.add_argument("--output", help="Write the analysis log as JSON to this path")
    parser.add_argument("--verbose", action="store_true", help="Log every analysed frame")
    return parser


def run_simulation(session: AnalysisSession, scenario_name: str) -> SummaryReport:
    scenario = next(s for s in load_predefined_scenarios() if s.name == scenario_name)
    logger.info("Running scenario %r: %s", scenario.name, scenario.description)
    session.start()
    for elapsed, detections in scenario.frames():
        session.process(detections, elapsed)
    return session.finish()


def run_video(session: AnalysisSession, args: argparse.Namespace) -> SummaryReport:
    from traffic_analytics.detection import DetectorConfig, ObjectDetector
    from traffic_analytics.video import VideoAnalysisRunner

    if not args.video:
        raise FileNotFoundError("Video mode requires --video")
    detector = ObjectDetector(
        DetectorConfig(model_path=args.model, confidence=args.confidence, iou=args.iou)
    )
    runner = VideoAnalysisRunner(args.video, session, detector)
    return runner.run(max_frames=args.max_frames)


def main(argv: list[str] | None = None) -> SummaryReport:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = AnalysisConfig(
        confidence_threshold=args.confidence,
        iou_threshold=args.iou,
        frame_skip=args.frame_skip,
    )
    try:
        session = AnalysisSession(config)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        if args.mode == "simulation":
            report = run_simulation(session, args.scenario)
        else:
            report = run_video(session, args)
    except FileNotFoundError as exc:
        logger.error("Video file not found: %s", exc)
        raise
    except ImportError as exc:
        logger.error("Missing dependency: %s", exc)
        logger.error("Install the video extras with: pip install 'traffic-analytics[video]'")
        raise

    logger.info("Summary:\n%s", json.dumps(summary_to_dict(report), indent=2))

    if args.output or args.mode == "video":
        output = Path(args.output) if args.output else Path(export_filename(args.video))
        save_log(session.log, output)
    return report


if __name__ == "__main__":
    main()
