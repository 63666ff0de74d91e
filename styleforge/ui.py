"""Minimal Tkinter UI with live preview for StyleForge.

Provides a desktop UI to:
- Load an image
- Pick one of the stylization effects
- See the transformed preview (computed off the UI thread)
- Save the result as ``transformed-<effect>.jpg``

Transforms run through :class:`~styleforge.session.TransformSession`, so a
newer request always wins over one still in flight.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, ImageTk

import tkinter as tk
from tkinter import ttk, filedialog, messagebox

from .effects import EFFECTS
from .session import TransformResult, TransformSession
from .utils.loader import EncodedImage, load_image, save_image

_LOGGER = logging.getLogger(__name__)


def _fit_preview(im: Image.Image, max_side: int) -> Image.Image:
    w, h = im.size
    scale = min(max_side / max(w, 1), max_side / max(h, 1))
    if scale >= 1.0:
        return im.copy()
    new_w, new_h = max(1, int(w * scale)), max(1, int(h * scale))
    return im.resize((new_w, new_h), resample=Image.Resampling.BILINEAR)


@dataclass
class UIState:
    image_path: Optional[Path] = None
    source: Optional[EncodedImage] = None
    result: Optional[TransformResult] = None
    preview_max_side: int = 768
    debounce_ms: int = 150


class App:
    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("StyleForge")
        self.state = UIState()
        self.session = TransformSession()

        self.var_effect = tk.StringVar(value=EFFECTS[0])
        self.var_status = tk.StringVar(value="Open an image to start.")

        self._build_ui()
        self._pending_update: Optional[str] = None
        self._preview_imgtk: Optional[ImageTk.PhotoImage] = None
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

    def _build_ui(self) -> None:
        frm = ttk.Frame(self.root, padding=8)
        frm.grid(row=0, column=0, sticky="nsew")
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        top = ttk.Frame(frm)
        top.grid(row=0, column=0, sticky="ew", pady=(0, 8))
        top.columnconfigure(4, weight=1)

        ttk.Button(top, text="Open…", command=self.on_open).grid(row=0, column=0, padx=(0, 8))

        ttk.Label(top, text="Effect").grid(row=0, column=1)
        cb_effect = ttk.Combobox(top, values=EFFECTS, textvariable=self.var_effect, width=10, state="readonly")
        cb_effect.grid(row=0, column=2, padx=(4, 12))
        cb_effect.bind("<<ComboboxSelected>>", lambda e: self._trigger_update())

        ttk.Button(top, text="Save…", command=self.on_save).grid(row=0, column=3)
        ttk.Label(top, textvariable=self.var_status).grid(row=0, column=4, sticky="e")

        self.canvas = tk.Canvas(frm, bg="#222", width=800, height=600)
        self.canvas.grid(row=1, column=0, sticky="nsew")
        frm.rowconfigure(1, weight=1)
        frm.columnconfigure(0, weight=1)

    def on_open(self) -> None:
        path = filedialog.askopenfilename(
            title="Open image",
            filetypes=[("Images", "*.jpg *.jpeg *.png *.webp"), ("All", "*.*")],
        )
        if not path:
            return
        try:
            src = load_image(path)
        except OSError as e:
            messagebox.showerror("Open failed", str(e))
            return
        self.state.image_path = Path(path)
        self.state.source = src
        self.state.result = None
        self._trigger_update()

    def on_save(self) -> None:
        result = self.state.result
        if result is None:
            messagebox.showinfo("Nothing to save", "Open an image and wait for the preview.")
            return
        initial_dir = self.state.image_path.parent if self.state.image_path else None
        out = filedialog.asksaveasfilename(
            defaultextension=".jpg",
            initialfile=result.filename,
            initialdir=initial_dir,
            filetypes=[("JPEG", ".jpg"), ("All", "*.*")],
        )
        if not out:
            return
        try:
            save_image(result.image, out)
        except OSError as e:
            messagebox.showerror("Save failed", str(e))
            return
        self.var_status.set(f"Wrote {out}")

    def on_close(self) -> None:
        self.session.reset()
        self.session.shutdown(wait=False)
        self.root.destroy()

    def _trigger_update(self) -> None:
        # Debounce UI changes to avoid recomputing too frequently
        if self._pending_update is not None:
            self.root.after_cancel(self._pending_update)
        self._pending_update = self.root.after(self.state.debounce_ms, self._start_worker)  # type: ignore

    def _start_worker(self) -> None:
        self._pending_update = None
        if self.state.source is None:
            return
        effect = self.var_effect.get()
        self.var_status.set(f"Applying {effect}…")
        self.session.submit(
            self.state.source,
            effect,
            on_ready=lambda r: self.root.after(0, lambda: self._show_result(r)),
            on_error=lambda gen, exc: self.root.after(0, lambda m=str(exc): self._show_error(m)),
        )

    def _show_result(self, result: TransformResult) -> None:
        # A newer request may have been issued after this one was scheduled.
        if not self.session.is_current(result.generation):
            return
        self.state.result = result
        with Image.open(io.BytesIO(result.image.data)) as im:
            preview = _fit_preview(im.convert("RGB"), self.state.preview_max_side)
        imgtk = ImageTk.PhotoImage(preview)
        self._preview_imgtk = imgtk  # keep reference to prevent GC
        self.canvas.delete("all")
        w = self.canvas.winfo_width()
        h = self.canvas.winfo_height()
        x = max(0, (w - imgtk.width()) // 2)
        y = max(0, (h - imgtk.height()) // 2)
        self.canvas.create_image(x, y, anchor="nw", image=imgtk)
        self.var_status.set(f"{result.effect}: {result.image.width}x{result.image.height}")

    def _show_error(self, msg: str) -> None:
        self.state.result = None
        self.canvas.delete("all")
        self.canvas.create_text(10, 10, anchor="nw", fill="#fff", text=f"Error: {msg}")
        self.var_status.set("Awaiting input.")


def run_ui() -> None:
    logging.basicConfig(level=logging.INFO)
    root = tk.Tk()
    App(root)
    root.minsize(640, 480)
    root.mainloop()


if __name__ == "__main__":  # pragma: no cover
    run_ui()
