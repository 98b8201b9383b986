# Script de arranque: lee la línea de comandos, abre la fuente de video,
# prepara el motor OCR y la ventana, y ejecuta el coordinador del pipeline.
#
# NOTAS:
# - El coordinador (captura/render/teclado) corre en el hilo principal; la
#   ventana (cv2 o CustomTkinter) debe vivir en ese hilo.
# - Los textos reconocidos y las estadísticas van a stdout; el log a stderr
#   (y a logs/videoocr.log).
import argparse
import sys
import threading

import cv2

from videoocr import config
from videoocr.config import PipelineConfig
from videoocr.core import events
from videoocr.core.capture import FrameSource
from videoocr.core.errors import CaptureError, ConfigError, JobFailed
from videoocr.core.events import EventBus
from videoocr.core.jobs import Frame, Job, OcrText, to_output
from videoocr.core.pipeline import EXIT_FAILURE, EXIT_OK, PipelineCoordinator
from videoocr.core.processing import RecognitionWorker, make_handoff
from videoocr.core.recognizer import TesseractEngine
from videoocr.core.regions import RegionModel, parse_region
from videoocr.core.state import PipelineState
from videoocr.core.strategies import STRATEGIES, make_strategy
from videoocr.gui.display import make_display
from videoocr.utils.logger import get_logger, setup_logging

logger = get_logger("videoocr.app")


class ResultPrinter:
    """
    Escribe en stdout, una línea cada vez, todo lo que el pipeline publica:
    textos, estadísticas, jobs descartados, regiones nuevas y pausas.
    Las líneas que no son texto reconocido no empiezan por "# Text".
    """
    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()

    def write(self, line):
        with self._lock:
            print(line, file=self.stream, flush=True)

    def on_text(self, result):
        self.write(result.format())

    def on_stats(self, report):
        self.write(report.format())

    def on_error(self, failure):
        self.write(f"# Error: {failure}")

    def on_region(self, region):
        # mismo formato que -r para poder reutilizarla al relanzar
        self.write(f"# Region added: -r {region.describe()}")

    def on_pause(self, paused):
        self.write("# OCR paused" if paused else "# OCR resumed")

    def attach(self, event_bus: EventBus):
        event_bus.subscribe(events.OCR_TEXT, self.on_text)
        event_bus.subscribe(events.STATS, self.on_stats)
        event_bus.subscribe(events.RECOGNITION_ERROR, self.on_error)
        event_bus.subscribe(events.REGION_ADDED, self.on_region)
        event_bus.subscribe(events.PAUSE_TOGGLED, self.on_pause)


def _region_arg(value):
    try:
        return parse_region(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def _languages_arg(value):
    try:
        return config.parse_languages(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    parser = argparse.ArgumentParser(prog="video-ocr",
                                     description="OCR continuo sobre regiones de un video o cámara.")
    parser.add_argument("-f", "--source", default=config.SOURCE,
                        help="Input device file, video file or camera index")
    parser.add_argument("-i", "--interval", type=int, default=config.OCR_INTERVAL_FRAMES,
                        help="Min interval (frames) for performing OCR")
    parser.add_argument("-s", "--sleep", type=int, default=config.FRAME_DELAY_MS,
                        help="Sleep millis between frames")
    parser.add_argument("-l", "--languages", type=_languages_arg, default=config.LANGUAGES,
                        help="Comma-separated list of languages")
    parser.add_argument("-w", "--width", type=int, default=config.FRAME_WIDTH,
                        help="Width of the video capture")
    parser.add_argument("-H", "--height", type=int, default=config.FRAME_HEIGHT,
                        help="Height of the video capture")
    parser.add_argument("--fps", type=int, default=config.TARGET_FPS, help="Capture FPS")
    parser.add_argument("-q", "--scale", type=float, default=config.OCR_SCALE,
                        help="Image scale for feeding OCR [0.1-1]")
    parser.add_argument("-r", "--region", type=_region_arg, action="append", default=[],
                        help="Region to OCR in the form of x,y,w,h (repeatable)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Make verbose")
    parser.add_argument("--hide-stats", action="store_true", help="Start with stats hidden")
    parser.add_argument("--display", choices=("cv", "ctk", "none"), default="cv",
                        help="Display backend")
    parser.add_argument("--preprocess", choices=sorted(STRATEGIES), default="scaled",
                        help="Preprocessing applied to each region")
    parser.add_argument("--on-error", choices=(config.ON_ERROR_CONTINUE, config.ON_ERROR_ABORT),
                        default=config.ON_ERROR_CONTINUE, help="What to do when a recognition job fails")
    parser.add_argument("--image", help="Run OCR once on an image file and exit")
    parser.add_argument("--log-folder", default=config.LOG_FOLDER,
                        help="Folder for the rotating log file ('' disables it)")
    parser.add_argument("--tesseract-cmd", help="Path to the tesseract binary")
    return parser


def parse_config(argv=None) -> PipelineConfig:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return PipelineConfig(
            source=config.parse_source(args.source),
            width=args.width,
            height=args.height,
            fps=args.fps,
            languages=args.languages,
            ocr_interval=args.interval,
            frame_delay_ms=args.sleep,
            ocr_scale=args.scale,
            regions=list(args.region),
            verbose=args.verbose,
            stats_hidden=args.hide_stats,
            display=args.display,
            preprocess=args.preprocess,
            on_error=args.on_error,
            image_path=args.image,
            log_folder=args.log_folder or None,
            tesseract_cmd=args.tesseract_cmd,
        )
    except ConfigError as e:
        parser.error(str(e))


def run_image(cfg: PipelineConfig, engine, printer: ResultPrinter) -> int:
    """Modo de una sola pasada sobre una imagen fija."""
    image = cv2.imread(cfg.image_path)
    if image is None:
        logger.error(f"No se pudo leer la imagen: {cfg.image_path}")
        return EXIT_FAILURE
    h, w = image.shape[:2]
    model = RegionModel(cfg.regions)
    model.default_if_empty(w, h)

    worker = RecognitionWorker(make_handoff(), engine, PipelineState(),
                               strategy=make_strategy(cfg.preprocess, cfg.ocr_scale))
    try:
        texts = worker.process_job(Job(Frame(image), model.regions()))
    except JobFailed as e:
        logger.error(f"Error: {e}")
        return EXIT_FAILURE
    for i, text in enumerate(texts):
        if text:
            printer.write(OcrText(i, to_output(text)).format())
    return EXIT_OK


def run(cfg: PipelineConfig) -> int:
    setup_logging(cfg.verbose, cfg.log_folder)
    printer = ResultPrinter()

    try:
        engine = TesseractEngine(cfg.languages, tesseract_cmd=cfg.tesseract_cmd)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    if cfg.image_path:
        return run_image(cfg, engine, printer)

    # Abrir la fuente de video e inicializarla
    try:
        source = FrameSource.open(cfg.source)
    except CaptureError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    source.configure(cfg.width, cfg.height, cfg.fps)
    if cfg.verbose:
        for name, value in source.properties().items():
            logger.debug(f"{name}: {value}")

    region_model = RegionModel(cfg.regions)
    frame_w, frame_h = source.frame_size()
    if frame_w <= 0 or frame_h <= 0:
        frame_w, frame_h = cfg.width, cfg.height
    region_model.default_if_empty(frame_w, frame_h)

    try:
        display = make_display(cfg.display, cfg.window_title)
    except Exception:
        source.release()
        raise

    event_bus = EventBus()
    printer.attach(event_bus)
    coordinator = PipelineCoordinator(cfg, source, display, engine, region_model, event_bus=event_bus)
    return coordinator.run()


def main(argv=None):
    cfg = parse_config(argv)
    sys.exit(run(cfg))


if __name__ == "__main__":
    main()
