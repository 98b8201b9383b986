# src/videoocr/test/quick_test_debug.py
# Prueba manual: cámara + OCR de frame completo cada segundo (no la recoge pytest).
import time
import cv2
from videoocr.core.jobs import Frame, Job
from videoocr.core.processing import RecognitionWorker, make_handoff
from videoocr.core.recognizer import TesseractEngine
from videoocr.core.regions import RegionModel
from videoocr.core.state import PipelineState

def main(duration=20, cam_src=0, langs=("eng",)):
    engine = TesseractEngine(list(langs))
    worker = RecognitionWorker(make_handoff(), engine, PipelineState())
    cap = cv2.VideoCapture(cam_src)
    if not cap.isOpened():
        print("ERROR: no se pudo abrir la cámara.")
        return
    t0 = time.time()
    last_ocr = 0.0
    print("Prueba rápida con debug. Pon texto delante de la cámara...")
    while time.time() - t0 < duration:
        ret, frame = cap.read()
        if not ret:
            continue
        if time.time() - last_ocr > 1.0:
            h, w = frame.shape[:2]
            model = RegionModel()
            model.default_if_empty(w, h)
            texts = worker.process_job(Job(Frame(frame.copy()), model.regions()))
            print("OCR:", [t for t in texts if t])
            last_ocr = time.time()
        cv2.imshow("Debug OCR (q para salir)", frame)
        if cv2.waitKey(1) & 0xFF == ord('q'):
            break
    cap.release()
    cv2.destroyAllWindows()
    print("Fin prueba.")

if __name__ == "__main__":
    main()
