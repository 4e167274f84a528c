"""
setup_model.py — Download the MediaPipe object detection model.

Run this ONCE before running the toy:
    python setup_model.py

It fetches 'efficientdet_lite0.tflite' (~7MB) from Google's public model
storage into the 'assets/' directory.  The model is trained on COCO,
whose 80 labels include "bird".

Certificate verification is only relaxed when the failure actually is a
certificate error (missing CA bundle on a fresh Python install), and
only for this one request.
"""

import os
import ssl
import sys
import urllib.error
import urllib.request

import config as cfg

CHUNK_SIZE = 64 * 1024


def download_model():
    os.makedirs(cfg.MODEL_DIR, exist_ok=True)
    model_path = os.path.join(cfg.MODEL_DIR, cfg.MODEL_FILENAME)

    if os.path.exists(model_path):
        size = os.path.getsize(model_path)
        print(f"[OK] Model already exists at '{model_path}' ({size:,} bytes)")
        return model_path

    print("Downloading object detection model...")
    print(f"  URL: {cfg.MODEL_URL}")
    print(f"  Destination: {model_path}")

    try:
        try:
            size = _fetch(cfg.MODEL_URL, model_path)
        except (ssl.SSLCertVerificationError, urllib.error.URLError) as e:
            if not _is_cert_error(e):
                raise
            print("\n  Certificate could not be verified, retrying this download unverified...")
            size = _fetch(cfg.MODEL_URL, model_path, opener=_unverified_opener())

        print(f"\n[OK] Download complete! ({size:,} bytes)")
        return model_path
    except Exception as e:
        # Never leave a partial model behind
        if os.path.exists(model_path):
            os.remove(model_path)
        print(f"\n[ERROR] Download failed: {e}")
        print()
        print("Please download the model manually:")
        print(f"  1. Open {cfg.MODEL_URL}")
        print(f"  2. Save the file as {model_path}")
        sys.exit(1)


def _is_cert_error(exc):
    """True for a certificate failure, raised directly or wrapped by urllib."""
    if isinstance(exc, ssl.SSLCertVerificationError):
        return True
    return (isinstance(exc, urllib.error.URLError)
            and isinstance(exc.reason, ssl.SSLCertVerificationError))


def _unverified_opener():
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return urllib.request.build_opener(urllib.request.HTTPSHandler(context=ctx))


def _fetch(url, dest, opener=None):
    """
    Stream `url` into `dest`.  Returns the byte count; raises OSError if
    the server announced a Content-Length and fewer bytes arrived.
    """
    open_url = opener.open if opener is not None else urllib.request.urlopen
    downloaded = 0

    with open_url(url) as response, open(dest, "wb") as f:
        total = int(response.headers.get("Content-Length") or 0)
        while True:
            chunk = response.read(CHUNK_SIZE)
            if not chunk:
                break
            f.write(chunk)
            downloaded += len(chunk)
            _print_progress(downloaded, total)

    if total and downloaded != total:
        raise OSError(f"incomplete download: {downloaded:,} of {total:,} bytes")
    return downloaded


def _print_progress(downloaded, total):
    if total > 0:
        percent = min(100, downloaded * 100 // total)
        bar = "#" * (percent // 2) + "-" * (50 - percent // 2)
        print(f"\r  [{bar}] {percent}%", end="", flush=True)


if __name__ == "__main__":
    download_model()
    print("\nYou're ready! Run: python main.py")
