"""
Jinja2 templates for the standalone HTML exports.
"""

PRINTABLE_BOOK_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{{ story.title }}</title>
  <link href="https://fonts.googleapis.com/css2?family=Crimson+Text:wght@400;600;700&family=Press+Start+2P&display=swap" rel="stylesheet">
  <style>
    body {
      margin: 0; padding: 0; background: #555;
      font-family: 'Crimson Text', serif;
      display: flex; flex-direction: column; align-items: center;
    }
    .print-page {
      width: 215.9mm; height: 279.4mm;
      background: white;
      position: relative;
      overflow: hidden;
      margin-bottom: 20px;
      box-shadow: 0 0 10px rgba(0,0,0,0.5);
      page-break-after: always;
      display: flex; flex-direction: column;
    }
    .cover-page { background: #000; color: #fbbf24; text-align: center; justify-content: center; }
    .cover-content { padding: 40px; height: 100%; display: flex; flex-direction: column; }
    .main-title { font-family: 'Press Start 2P'; font-size: 32pt; margin-bottom: 10px; line-height: 1.2; text-shadow: 4px 4px 0 #b45309; }
    .subtitle { font-family: 'Press Start 2P'; font-size: 10pt; color: #888; margin-bottom: 40px; letter-spacing: 2px; }
    .cover-image-box { flex: 1; border: 4px solid #fff; overflow: hidden; margin-bottom: 40px; }
    .cover-image-box img { width: 100%; height: 100%; object-fit: cover; image-rendering: pixelated; }
    .cover-footer { font-family: 'Press Start 2P'; font-size: 8pt; color: #666; }
    .image-page { background: #000; justify-content: center; }
    .full-image { width: 100%; height: 95%; object-fit: cover; image-rendering: pixelated; }
    .text-page { background: #fff; justify-content: center; align-items: center; }
    .text-wrapper { padding: 60px; width: 100%; height: 100%; display: flex; align-items: center; justify-content: center; background-image: radial-gradient(#ccc 1px, transparent 1px); background-size: 20px 20px; }
    .text-content { font-size: 24pt; line-height: 1.6; text-align: justify; border: 4px double #000; padding: 40px; background: #fff; width: 100%; }
    .text-content p { margin-bottom: 24px; }
    .page-footer { position: absolute; bottom: 20px; width: 100%; text-align: center; font-family: 'Press Start 2P'; font-size: 10pt; color: #888; }
    .image-page .page-footer { color: #fbbf24; }
    @media print {
      body { background: none; }
      .print-page { margin: 0; box-shadow: none; border: none; }
    }
  </style>
</head>
<body>
  <div class="print-page cover-page">
    <div class="cover-content">
      <h1 class="main-title">{{ story.title }}</h1>
      <p class="subtitle">A PIXETALE ADVENTURE</p>
      <div class="cover-image-box">
        <img src="{{ story.cover_image_url or '' }}" alt="Cover">
      </div>
      <div class="cover-footer">
        <p>DEVELOPED FOR PIXETALE</p>
      </div>
    </div>
  </div>
{% for page in story.pages %}
  <div class="print-page image-page">
    <img class="full-image" src="{{ page.image_url or '' }}" alt="Scene {{ loop.index }}">
    <div class="page-footer">- Art {{ loop.index }} -</div>
  </div>
  <div class="print-page text-page">
    <div class="text-wrapper">
      <div class="text-content">
{% for paragraph in page.paragraphs() %}        <p>{{ paragraph }}</p>
{% endfor %}      </div>
    </div>
    <div class="page-footer">- Story {{ loop.index }} -</div>
  </div>
{% endfor %}
</body>
</html>
"""

COLORING_BOOK_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{{ story.title }} - Coloring</title>
  <link href="https://fonts.googleapis.com/css2?family=Press+Start+2P&display=swap" rel="stylesheet">
  <style>
    body { background-color: #f0f0f0; margin: 0; padding: 20px; display: flex; flex-direction: column; align-items: center; }
    .letter-page { width: 215.9mm; height: 279.4mm; background-color: #fff; margin-bottom: 20px; position: relative; box-shadow: 0 5px 15px rgba(0,0,0,0.1); border: 1px solid #ccc; page-break-after: always; display: flex; flex-direction: column; align-items: center; justify-content: center; }
    .cover-title { font-family: 'Press Start 2P'; font-size: 28pt; text-align: center; margin: 40px 20px; }
    .cover-label { font-family: 'Press Start 2P'; font-size: 12pt; margin-bottom: 40px; color: #333; }
    .cover-frame { width: 80%; height: 50%; border: 4px solid #000; overflow: hidden; }
    .page-frame { width: 100%; height: 85%; border: 4px solid #000; overflow: hidden; background: #fff; }
    .story-page { padding: 40px; box-sizing: border-box; }
    .line-art { width: 100%; height: 100%; object-fit: cover; filter: grayscale(100%) contrast(150%) brightness(120%); image-rendering: pixelated; }
    .name-line { margin-top: auto; margin-bottom: 40px; text-align: center; font-family: 'Press Start 2P'; font-size: 10pt; }
    .page-label { margin-top: 20px; font-family: 'Press Start 2P'; font-size: 12pt; }
    .print-btn { padding: 10px 20px; font-family: 'Press Start 2P'; cursor: pointer; margin-bottom: 20px; background: white; border: 2px solid black; }
    @media print {
      body { background: none; padding: 0; }
      .letter-page { box-shadow: none; margin: 0; border: none; }
      .no-print { display: none; }
    }
  </style>
</head>
<body>
  <button class="print-btn no-print" onclick="window.print()">PRINT</button>
  <div class="letter-page">
    <h1 class="cover-title">{{ story.title }}</h1>
    <p class="cover-label">COLORING BOOK</p>
    <div class="cover-frame">
      <img class="line-art" src="{{ story.cover_image_url or '' }}" alt="Cover">
    </div>
    <div class="name-line">
      <p>NAME: __________________________</p>
    </div>
  </div>
{% for page in story.pages %}
  <div class="letter-page story-page">
    <div class="page-frame">
      <img class="line-art" src="{{ page.image_url or '' }}" alt="Page {{ loop.index }}">
    </div>
    <div class="page-label">Page {{ loop.index }}</div>
  </div>
{% endfor %}
</body>
</html>
"""

FLIPBOOK_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ story.title }} - Interactive App</title>
  <script src="{{ page_flip_script }}"></script>
  <link href="https://fonts.googleapis.com/css2?family=Press+Start+2P&family=VT323&display=swap" rel="stylesheet">
  <style>
    body { background-color: #1a1a1a; margin: 0; display: flex; justify-content: center; align-items: center; height: 100vh; overflow: hidden; font-family: 'VT323', monospace; }
    .flip-book { box-shadow: 0 0 20px rgba(0,0,0,0.5); display: none; background-size: cover; }
    .page { padding: 20px; background-color: #fdfdfd; border: 1px solid #c2c2c2; overflow: hidden; }
    .page-content { width: 100%; height: 100%; display: flex; flex-direction: column; justify-content: space-between; }
    .page-cover { background-color: #0d0d1a; color: #fbbf24; border: 4px solid #fbbf24; }
    .pixel-font { font-family: 'Press Start 2P', cursive; }
    .title { text-align: center; font-size: 20px; text-transform: uppercase; margin-top: 20px; text-shadow: 2px 2px 0 #b45309; }
    .cover-image-container { flex: 1; margin: 20px; border: 4px solid #fff; overflow: hidden; }
    .pixel-art-img { width: 100%; height: 100%; object-fit: cover; image-rendering: pixelated; }
    .image-mode { padding: 0; background: #000; justify-content: center; align-items: center; }
    .full-height { width: 100%; height: 100%; object-fit: cover; }
    .text-mode { background: #fff; color: #000; justify-content: center; }
    .text-box { padding: 20px; font-size: 24px; line-height: 1.5; text-align: justify; border: 2px dashed #ccc; height: 90%; overflow-y: auto; }
    .text-box p { margin-bottom: 15px; }
    .the-end { justify-content: center; align-items: center; }
    .the-end h2 { font-size: 40px; margin-top: 40%; }
    .the-end p { font-family: 'VT323', monospace; font-size: 24px; margin-top: 20px; }
    .page-number { font-family: 'Press Start 2P'; font-size: 10px; color: #888; position: absolute; bottom: 10px; }
    .left-num { left: 10px; color: #fbbf24; }
    .right-num { right: 10px; }
    .footer { text-align: center; font-size: 10px; margin-bottom: 10px; animation: blink 2s infinite; }
    @keyframes blink { 50% { opacity: 0; } }
    .controls { position: fixed; bottom: 20px; left: 50%; transform: translateX(-50%); z-index: 99; display: flex; gap: 20px; }
    .btn { background: #fbbf24; border: 4px solid #fff; padding: 10px 20px; font-family: 'Press Start 2P'; cursor: pointer; box-shadow: 4px 4px 0 #000; }
    .btn:active { transform: translate(2px, 2px); box-shadow: 2px 2px 0 #000; }
  </style>
</head>
<body>
  <div class="container">
    <div id="book" class="flip-book">
      <div class="page page-cover" data-density="hard">
        <div class="page-content">
          <h1 class="pixel-font title">{{ story.title }}</h1>
          <div class="cover-image-container">
            <img src="{{ story.cover_image_url or '' }}" class="pixel-art-img" alt="Cover">
          </div>
          <div class="footer">CLICK OR DRAG CORNER TO OPEN</div>
        </div>
      </div>
{% for page in story.pages %}
      <div class="page" data-density="soft">
        <div class="page-content image-mode">
          <img src="{{ page.image_url or '' }}" class="pixel-art-img full-height" alt="Page {{ loop.index }}">
          <span class="page-number left-num">{{ loop.index }}A</span>
        </div>
      </div>
      <div class="page" data-density="soft">
        <div class="page-content text-mode">
          <div class="text-box">
{% for line in page.content.splitlines() if line.strip() %}            <p>{{ line.strip() }}</p>
{% endfor %}          </div>
          <span class="page-number right-num">{{ loop.index }}B</span>
        </div>
      </div>
{% endfor %}
      <div class="page page-cover" data-density="hard">
        <div class="page-content the-end">
          <h2 class="pixel-font">THE END</h2>
          <p>Generated with PixeTale</p>
        </div>
      </div>
    </div>
  </div>
  <div class="controls">
    <button class="btn" onclick="book.flipPrev()">PREV</button>
    <button class="btn" onclick="book.flipNext()">NEXT</button>
  </div>
  <script>
    const audioCtx = new (window.AudioContext || window.webkitAudioContext)();
    function playFlipSound() {
      if (audioCtx.state === 'suspended') audioCtx.resume();
      const oscillator = audioCtx.createOscillator();
      const gainNode = audioCtx.createGain();
      oscillator.connect(gainNode);
      gainNode.connect(audioCtx.destination);
      oscillator.type = 'square';
      oscillator.frequency.setValueAtTime(150, audioCtx.currentTime);
      oscillator.frequency.exponentialRampToValueAtTime(600, audioCtx.currentTime + 0.1);
      gainNode.gain.setValueAtTime(0.05, audioCtx.currentTime);
      gainNode.gain.exponentialRampToValueAtTime(0.01, audioCtx.currentTime + 0.1);
      oscillator.start();
      oscillator.stop(audioCtx.currentTime + 0.1);
    }
    const pageFlip = new St.PageFlip(document.getElementById('book'), {
      width: 450, height: 600, size: 'stretch', minWidth: 300, maxWidth: 800,
      minHeight: 400, maxHeight: 1200, maxShadowOpacity: 0.5, showCover: true,
      mobileScrollSupport: false
    });
    pageFlip.loadFromHTML(document.querySelectorAll('.page'));
    document.getElementById('book').style.display = 'block';
    pageFlip.on('flip', function () { playFlipSound(); });
    document.addEventListener('keydown', function (e) {
      if (e.key === 'ArrowRight') pageFlip.flipNext();
      if (e.key === 'ArrowLeft') pageFlip.flipPrev();
    });
    window.book = pageFlip;
  </script>
</body>
</html>
"""
