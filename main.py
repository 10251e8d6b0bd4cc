import tkinter as tk
from tkinter import ttk, messagebox
import sys

from audio_source import AudioSession, default_source, get_source, list_sources
from config import SA_REFERENCES, UI_UPDATE_MS, DEFAULT_SETTINGS
from errors import InvalidBaseFrequency, AudioSourceError
from pipeline import SwaraPipeline
from swara_classifier import tolerance_for


class SwaraDetector:
    def __init__(self, root, source_name="microphone"):
        self.root = root
        self.root.title("Swara Detector")
        self.root.geometry("1200x800")
        self.root.configure(bg="#1a1a2e")

        self.pipeline = SwaraPipeline(DEFAULT_SETTINGS)
        self.session = None
        self.poll_id = None
        self.sources = list_sources()
        self.source_name = default_source(source_name)

        self.swara_cards = {}
        self.setup_ui()
        self.update_swara_cards()

    # ═══════════════════════════════════════════════════════════════════════
    #  UI CONSTRUCTION
    # ═══════════════════════════════════════════════════════════════════════

    def setup_ui(self):
        self.bg_dark = "#1a1a2e"
        self.bg_medium = "#16213e"
        self.bg_light = "#0f3460"
        self.accent = "#00d9ff"
        self.text_color = "#ffffff"
        self.success = "#00ff88"
        self.warning = "#ffaa00"
        self.danger = "#ff4444"

        title_frame = tk.Frame(self.root, bg=self.bg_dark)
        title_frame.pack(fill=tk.X, padx=20, pady=(20, 10))
        tk.Label(title_frame, text="SWARA DETECTOR", font=("Arial", 28, "bold"),
                 fg=self.accent, bg=self.bg_dark).pack()
        tk.Label(title_frame, text="Detect Indian Classical Music Swaras from Audio Input",
                 font=("Arial", 12), fg=self.text_color, bg=self.bg_dark).pack()

        main_frame = tk.Frame(self.root, bg=self.bg_dark)
        main_frame.pack(fill=tk.BOTH, expand=True, padx=20, pady=10)

        # Left panel - input & detection
        left_panel = tk.Frame(main_frame, bg=self.bg_medium, relief=tk.RAISED, bd=2)
        left_panel.pack(side=tk.LEFT, fill=tk.Y, padx=(0, 10))

        tk.Label(left_panel, text="INPUT & DETECTION", font=("Arial", 14, "bold"),
                 fg=self.accent, bg=self.bg_medium).pack(pady=(20, 15))

        tk.Label(left_panel, text="Base Sa Frequency (Hz)", font=("Arial", 10),
                 fg=self.text_color, bg=self.bg_medium).pack()
        self.sa_var = tk.StringVar(value=f"{self.pipeline.base_frequency:g}")
        self.sa_entry = tk.Entry(left_panel, textvariable=self.sa_var, width=10)
        self.sa_entry.pack(pady=5, padx=20)
        self.sa_entry.bind("<Return>", lambda e: self.apply_sa_base())

        # Inline message for rejected input
        self.sa_error_label = tk.Label(left_panel, text="", font=("Arial", 9),
                                       fg=self.danger, bg=self.bg_medium, wraplength=180)
        self.sa_error_label.pack()

        self.detect_btn = tk.Button(left_panel, text="Detect Swaras", command=self.apply_sa_base,
                                    bg=self.accent, fg="black", font=("Arial", 11, "bold"),
                                    relief=tk.FLAT, cursor="hand2", width=15)
        self.detect_btn.pack(pady=5, padx=20)

        self.record_btn = tk.Button(left_panel, text="● Record Audio", command=self.toggle_recording,
                                    bg=self.success, fg="black", font=("Arial", 11, "bold"),
                                    relief=tk.FLAT, cursor="hand2", width=15)
        self.record_btn.pack(pady=5, padx=20)

        self.clear_btn = tk.Button(left_panel, text="Clear Graph", command=self.clear_graph,
                                   bg=self.warning, fg="black", font=("Arial", 11, "bold"),
                                   relief=tk.FLAT, cursor="hand2", width=15)
        self.clear_btn.pack(pady=5, padx=20)

        tk.Label(left_panel, text="Audio source", font=("Arial", 10),
                 fg=self.text_color, bg=self.bg_medium).pack(pady=(15, 0))
        self.source_var = tk.StringVar(value=self.source_name)
        self.source_box = ttk.Combobox(left_panel, textvariable=self.source_var,
                                       values=[n for n, status in self.sources.items() if status == 'available'],
                                       state="readonly", width=12)
        self.source_box.pack(pady=5)

        ref_frame = tk.Frame(left_panel, bg=self.bg_light, relief=tk.SUNKEN, bd=1)
        ref_frame.pack(pady=20, padx=20, fill=tk.X)
        tk.Label(ref_frame, text="Common Sa Reference Frequencies", font=("Arial", 10, "bold"),
                 fg=self.accent, bg=self.bg_light).pack(pady=5)
        for who, hz in SA_REFERENCES:
            tk.Label(ref_frame, text=f"{who}: {hz}", font=("Arial", 9),
                     fg=self.text_color, bg=self.bg_light, justify=tk.LEFT).pack(anchor=tk.W, padx=10)

        # Right panel - display
        right_panel = tk.Frame(main_frame, bg=self.bg_medium)
        right_panel.pack(side=tk.RIGHT, fill=tk.BOTH, expand=True)

        note_frame = tk.Frame(right_panel, bg=self.bg_dark, relief=tk.RAISED, bd=3)
        note_frame.pack(fill=tk.X, padx=10, pady=10)
        tk.Label(note_frame, text="CURRENT DETECTION", font=("Arial", 12),
                 fg=self.accent, bg=self.bg_dark).pack(pady=(10, 0))
        self.swara_label = tk.Label(note_frame, text="No swara detected", font=("Arial", 40, "bold"),
                                    fg=self.text_color, bg=self.bg_dark)
        self.swara_label.pack(pady=10)

        freq_frame = tk.Frame(right_panel, bg=self.bg_light, relief=tk.RAISED, bd=2)
        freq_frame.pack(fill=tk.X, padx=10, pady=5)
        tk.Label(freq_frame, text="FREQUENCY", font=("Arial", 11),
                 fg=self.accent, bg=self.bg_light).pack(side=tk.LEFT, padx=20, pady=10)
        self.freq_label = tk.Label(freq_frame, text="-- Hz", font=("Arial", 28, "bold"),
                                   fg=self.text_color, bg=self.bg_light)
        self.freq_label.pack(side=tk.RIGHT, padx=20, pady=10)

        cents_frame = tk.Frame(right_panel, bg=self.bg_light, relief=tk.RAISED, bd=2)
        cents_frame.pack(fill=tk.X, padx=10, pady=5)
        tk.Label(cents_frame, text="CENTS FROM SWARA", font=("Arial", 11),
                 fg=self.accent, bg=self.bg_light).pack(side=tk.LEFT, padx=20, pady=10)
        self.cents_label = tk.Label(cents_frame, text="--", font=("Arial", 24, "bold"),
                                    fg=self.text_color, bg=self.bg_light)
        self.cents_label.pack(side=tk.RIGHT, padx=20, pady=10)

        # All 12 swaras in two rows
        cards_frame = tk.Frame(right_panel, bg=self.bg_dark)
        cards_frame.pack(fill=tk.X, padx=10, pady=(5, 0))
        tk.Label(cards_frame, text="DETECTED SWARAS", font=("Arial", 10, "bold"),
                 fg=self.accent, bg=self.bg_dark).grid(row=0, column=0, columnspan=6, sticky=tk.W, padx=5)
        for i, swara in enumerate(self.pipeline.scale):
            lbl = tk.Label(cards_frame, text="", font=("Arial", 10, "bold"),
                           fg=self.text_color, bg=self.bg_medium, width=10, height=2)
            lbl.grid(row=1 + i // 6, column=i % 6, padx=3, pady=3)
            self.swara_cards[swara.name] = lbl

        graph_frame = tk.Frame(right_panel, bg=self.bg_dark, relief=tk.SUNKEN, bd=2)
        graph_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)
        tk.Label(graph_frame, text="FREQUENCY HISTORY", font=("Arial", 12),
                 fg=self.accent, bg=self.bg_dark).pack(pady=5)
        self.canvas = tk.Canvas(graph_frame, bg="#0a0a15", highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

        self.status_bar = tk.Label(self.root, text="Ready - set your Sa and press Record Audio",
                                   font=("Arial", 9), fg=self.text_color,
                                   bg=self.bg_light, anchor=tk.W, relief=tk.SUNKEN)
        self.status_bar.pack(side=tk.BOTTOM, fill=tk.X)

    def update_swara_cards(self, active=None):
        """Refresh card text from the current scale and highlight the active swara"""
        for swara in self.pipeline.scale:
            lbl = self.swara_cards[swara.name]
            lbl.config(text=f"{swara.name}\n{swara.frequency:.2f} Hz")
            if swara.name == active:
                lbl.config(bg=self.success, fg="black")
            else:
                lbl.config(bg=self.bg_medium if swara.is_main else self.bg_dark, fg=self.text_color)

    # ═══════════════════════════════════════════════════════════════════════
    #  SA INPUT
    # ═══════════════════════════════════════════════════════════════════════

    def apply_sa_base(self):
        """Apply a new base Sa; rejected input keeps the previous scale"""
        try:
            scale = self.pipeline.set_base_frequency(self.sa_var.get().strip())
        except InvalidBaseFrequency:
            self.sa_error_label.config(text="Please enter a valid base frequency")
            return
        self.sa_error_label.config(text="")
        self.update_swara_cards()
        if not self.pipeline.is_recording:
            self.freq_label.config(text=f"{scale.base_frequency:g} Hz")
            self.swara_label.config(text="Sa (Base)", fg=self.success)
        self.status_bar.config(
            text=f"Sa set to {scale.base_frequency:.2f} Hz  |  "
                 f"tolerance ±{tolerance_for(scale.base_frequency):.1f} Hz")

    # ═══════════════════════════════════════════════════════════════════════
    #  RECORDING
    # ═══════════════════════════════════════════════════════════════════════

    def toggle_recording(self):
        if self.pipeline.is_recording:
            self.stop_recording()
        else:
            self.start_recording()

    def start_recording(self):
        name = self.source_var.get()
        try:
            kwargs = {"realtime": True, "frequency": self.pipeline.base_frequency} if name == "sine" else {}
            self.session = AudioSession(get_source(name, **kwargs)).open()
        except (AudioSourceError, ImportError, ValueError) as e:
            self.session = None
            title = "Microphone Error" if name == "microphone" else "Audio Source Error"
            messagebox.showerror(title, f"Error opening {name} source:\n{e}")
            return

        self.pipeline.start_capture(self.session)
        self.record_btn.config(text="■ Stop Recording", bg=self.danger)
        self.source_box.config(state=tk.DISABLED)
        self.status_bar.config(text="Listening... Start singing!")
        self.canvas.delete("all")
        self.poll_pipeline()

    def stop_recording(self):
        if self.poll_id is not None:
            self.root.after_cancel(self.poll_id)
            self.poll_id = None
        self.pipeline.stop_capture()
        if self.session:
            self.session.close()
            self.session = None
        self.record_btn.config(text="● Record Audio", bg=self.success)
        self.source_box.config(state="readonly")
        self.freq_label.config(text="-- Hz")
        self.swara_label.config(text="No swara detected", fg=self.text_color)
        self.cents_label.config(text="--", fg=self.text_color)
        self.update_swara_cards()
        self.status_bar.config(text="Stopped")

    def clear_graph(self):
        self.pipeline.clear_history()
        self.canvas.delete("all")

    def poll_pipeline(self):
        """Read the latest sample and history snapshot and redraw"""
        self.poll_id = None
        if not self.pipeline.is_recording:
            err = self.pipeline.capture_error
            if err is not None and self.session is not None:
                self.stop_recording()
                self.status_bar.config(text=f"Capture stopped: {err}")
                messagebox.showerror("Audio Capture Error", f"Audio input failed:\n{err}")
            return
        sample = self.pipeline.last_sample
        if sample is not None:
            self.freq_label.config(text=f"{sample.frequency:.2f} Hz")
            if sample.matched:
                self.swara_label.config(text=sample.swara_name, fg=self.success)
                self.cents_label.config(text=f"{sample.cents:+.0f}¢", fg=self.cents_color(sample.cents))
            else:
                self.swara_label.config(text="No swara detected", fg=self.text_color)
                self.cents_label.config(text="--", fg=self.text_color)
            self.update_swara_cards(active=sample.swara_name)
            self.status_bar.config(
                text=f"Freq: {sample.frequency:.2f} Hz | Sa: {self.pipeline.base_frequency:.2f} Hz"
                     + (f" | Swara: {sample.swara_name}" if sample.matched else ""))
        self.draw_graph(self.pipeline.history_snapshot())
        self.poll_id = self.root.after(UI_UPDATE_MS, self.poll_pipeline)

    def cents_color(self, cents):
        if abs(cents) < 5:
            return self.success
        elif abs(cents) < 15:
            return self.warning
        return self.danger

    # ═══════════════════════════════════════════════════════════════════════
    #  GRAPH
    # ═══════════════════════════════════════════════════════════════════════

    def draw_graph(self, samples):
        """Draw frequency history with swara gridlines"""
        self.canvas.delete("all")
        if len(samples) < 2:
            return

        width = self.canvas.winfo_width()
        height = self.canvas.winfo_height()
        if width < 10 or height < 10:
            return

        freqs = [s.frequency for s in samples]
        min_freq = min(freqs) - 20
        max_freq = max(freqs) + 20
        freq_range = max_freq - min_freq
        if freq_range < 1:
            return

        def fy(f):
            return height - (height * (f - min_freq) / freq_range)

        for swara in self.pipeline.scale:
            if min_freq <= swara.frequency <= max_freq:
                y = fy(swara.frequency)
                is_sa = swara.name == 'Sa'
                self.canvas.create_line(0, y, width, y, fill="#3a3a10" if is_sa else "#1e1e3a",
                                        width=2 if is_sa else 1, dash=(4, 4))
                self.canvas.create_text(width - 4, y - 2, text=swara.name, anchor=tk.NE,
                                        fill="#666666", font=("Arial", 8))

        for i in range(5):
            y = height * i / 4
            self.canvas.create_line(0, y, width, y, fill="#1a1a2e", width=1)
            self.canvas.create_text(5, y, text=f"{max_freq - freq_range * i / 4:.0f}",
                                    anchor=tk.NW, fill="#666666", font=("Arial", 8))

        points = []
        for i, f in enumerate(freqs):
            points.extend([width * i / (len(freqs) - 1), fy(f)])

        for offset in [4, 3, 2, 1]:
            color_val = int(255 * offset / 4)
            self.canvas.create_line(points, fill=f"#{color_val:02x}c8ff", width=offset * 2, smooth=True)
        self.canvas.create_line(points, fill=self.accent, width=2, smooth=True)

        for i, sample in enumerate(samples):
            x = width * i / (len(samples) - 1)
            y = fy(sample.frequency)
            if sample.matched:
                fill, outline = self.success, "#88ffcc"
            else:
                fill, outline = "#004c66", self.accent
            self.canvas.create_oval(x - 3, y - 3, x + 3, y + 3, fill=fill, outline=outline)

    # ═══════════════════════════════════════════════════════════════════════
    #  CLEANUP
    # ═══════════════════════════════════════════════════════════════════════

    def on_closing(self):
        """Clean up on exit"""
        self.pipeline.stop_capture()
        if self.session:
            self.session.close()
            self.session = None
        self.root.destroy()


def main():
    source = sys.argv[1] if len(sys.argv) > 1 else "microphone"
    root = tk.Tk()
    app = SwaraDetector(root, source_name=source)
    root.protocol("WM_DELETE_WINDOW", app.on_closing)
    try:
        root.mainloop()
    except KeyboardInterrupt:
        try:
            app.on_closing()
        except Exception:
            pass
        sys.exit(0)


if __name__ == "__main__":
    main()
