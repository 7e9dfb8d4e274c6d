from enum import Enum

# --- Область и сетка по умолчанию (градусы WGS84)
# Прямоугольник просмотра исходного приложения (Семей, правый берег Иртыша)
DEFAULT_LON_MIN = 82.52
DEFAULT_LON_MAX = 82.72
DEFAULT_LAT_MIN = 49.88
DEFAULT_LAT_MAX = 50.02

# Шаг сетки для изолиний трафика (градусы)
DEFAULT_CONTOUR_CELL_DEG = 0.002
# Шаг сетки для заливки ячеек (качество воздуха, градусы)
DEFAULT_FILL_CELL_DEG = 0.00115

# --- Гармонический генератор поля
# Шаг перевода индексов сетки в фазу гармоник
HARMONIC_STEP = 0.08
# Веса шести гармоник (последняя - «дальняя» косинусная волна по индексам)
HARMONIC_WEIGHTS = (1.0, 1.0, 1.0, 1.0, 0.5, 1.0)
# Делитель суммы гармоник (среднее по шести слагаемым)
HARMONIC_NORM = 6.0
# Вклад широтного градиента (север «грязнее»)
HARMONIC_GRADIENT_WEIGHT = 0.25
# Аффинное отображение суммы в [0, 1]: offset + scale * n
HARMONIC_OFFSET = 0.5
HARMONIC_SCALE = 0.55
# Амплитуда локального «бугра», ломающего регулярность
HARMONIC_BUMP_AMPLITUDE = 0.07

# --- Генератор «коридор»: центр города + мост
CORRIDOR_CENTER_LON = 82.614
CORRIDOR_CENTER_LAT = 49.948
# Радиус спада от центра (градусы)
CORRIDOR_CENTER_RADIUS_DEG = 0.08
# Широта мостового перехода и параметры гауссова коридора
CORRIDOR_BRIDGE_LAT = 49.94
CORRIDOR_BRIDGE_AMPLITUDE = 0.6
CORRIDOR_BRIDGE_WIDTH_SQ = 0.00015

# --- Marching squares
# Порог вырожденного ребра: при |vB - vA| меньше порога берётся середина ребра
MS_DEGENERATE_EDGE_EPS = 1e-9
# Вес для усреднения четырёх значений в ячейке (1/4) при разрешении седла
MARCHING_SQUARES_CENTER_WEIGHT = 0.25

# Битовая раскладка (против часовой стрелки, начиная с нижнего левого):
# b0: BL, b1: BR, b2: TR, b3: TL
MS_MASK_EMPTY = 0  # 0b0000 - все ниже уровня
MS_MASK_FULL = 15  # 0b1111 - все выше уровня

# Одиночные углы
MS_MASK_BL = 1  # 0b0001 - только нижний левый
MS_MASK_BR = 2  # 0b0010 - только нижний правый
MS_MASK_TR = 4  # 0b0100 - только верхний правый
MS_MASK_TL = 8  # 0b1000 - только верхний левый

# Две вершины - стороны клетки
MS_MASK_BOTTOM = 3  # 0b0011 - BL+BR
MS_MASK_RIGHT = 6  # 0b0110 - BR+TR
MS_MASK_TOP = 12  # 0b1100 - TR+TL
MS_MASK_LEFT = 9  # 0b1001 - BL+TL

# Диагональные (седловые) случаи
MS_MASK_BL_TR = 5  # 0b0101 - BL+TR
MS_MASK_BR_TL = 10  # 0b1010 - BR+TL

# Три вершины - «всё кроме …»
MS_MASK_NOT_TL = 7  # 0b0111
MS_MASK_NOT_TR = 11  # 0b1011
MS_MASK_NOT_BR = 13  # 0b1101
MS_MASK_NOT_BL = 14  # 0b1110

# Рёбра клетки: ребро k соединяет угол k с углом (k + 1) % 4
MS_EDGE_BOTTOM = 0
MS_EDGE_RIGHT = 1
MS_EDGE_TOP = 2
MS_EDGE_LEFT = 3

# Случаи, когда изолиния в клетке отсутствует
MS_NO_CONTOUR_CASES = {MS_MASK_EMPTY, MS_MASK_FULL}
MS_AMBIGUOUS_CASES = (MS_MASK_BL_TR, MS_MASK_BR_TL)  # (5, 10) седловые

# Таблица случаев: маска -> пары рёбер, соединяемые отрезками
MS_CASE_EDGES: dict[int, tuple[tuple[int, int], ...]] = {
    MS_MASK_EMPTY: (),
    MS_MASK_BL: ((MS_EDGE_BOTTOM, MS_EDGE_LEFT),),
    MS_MASK_BR: ((MS_EDGE_BOTTOM, MS_EDGE_RIGHT),),
    MS_MASK_BOTTOM: ((MS_EDGE_RIGHT, MS_EDGE_LEFT),),
    MS_MASK_TR: ((MS_EDGE_RIGHT, MS_EDGE_TOP),),
    MS_MASK_BL_TR: (
        (MS_EDGE_BOTTOM, MS_EDGE_RIGHT),
        (MS_EDGE_TOP, MS_EDGE_LEFT),
    ),
    MS_MASK_RIGHT: ((MS_EDGE_BOTTOM, MS_EDGE_TOP),),
    MS_MASK_NOT_TL: ((MS_EDGE_TOP, MS_EDGE_LEFT),),
    MS_MASK_TL: ((MS_EDGE_TOP, MS_EDGE_LEFT),),
    MS_MASK_LEFT: ((MS_EDGE_BOTTOM, MS_EDGE_TOP),),
    # Намеренно не (1, 3), (0, 2) как в веб-просмотрщике: те отрезки пересекаются
    MS_MASK_BR_TL: (
        (MS_EDGE_BOTTOM, MS_EDGE_LEFT),
        (MS_EDGE_RIGHT, MS_EDGE_TOP),
    ),
    MS_MASK_NOT_TR: ((MS_EDGE_RIGHT, MS_EDGE_TOP),),
    MS_MASK_TOP: ((MS_EDGE_RIGHT, MS_EDGE_LEFT),),
    MS_MASK_NOT_BR: ((MS_EDGE_BOTTOM, MS_EDGE_RIGHT),),
    MS_MASK_NOT_BL: ((MS_EDGE_BOTTOM, MS_EDGE_LEFT),),
    MS_MASK_FULL: (),
}

# Седло с центром ниже уровня: противоположное сопряжение рёбер
MS_SADDLE_LOW_CENTER_EDGES: dict[int, tuple[tuple[int, int], ...]] = {
    MS_MASK_BL_TR: MS_CASE_EDGES[MS_MASK_BR_TL],
    MS_MASK_BR_TL: MS_CASE_EDGES[MS_MASK_BL_TR],
}

# --- Сшивка отрезков в полилинии
# Две точки совпадают, если каждая координата отличается меньше допуска (градусы)
STITCH_TOLERANCE_DEG = 1e-8
# Минимальное количество точек в полилинии
MIN_POINTS_FOR_LINE = 2

# Количество параллельных воркеров для построения изолиний по уровням
CONTOUR_PARALLEL_WORKERS = 1

# --- Уровни изолиний трафика по умолчанию
DEFAULT_ISO_THRESHOLDS = (0.25, 0.5, 0.75)
DEFAULT_ISO_COLORS = ('#22c55e', '#eab308', '#ef4444')
DEFAULT_ISO_ALPHA = 0.9
DEFAULT_ISO_WIDTH = 2.5

# --- Палитры классификаторов
COLOR_GREEN = '#22c55e'
COLOR_LIME = '#84cc16'
COLOR_YELLOW = '#eab308'
COLOR_ORANGE = '#f97316'
COLOR_RED = '#ef4444'

# Качество воздуха, заливка ячеек (три корзины)
AIR_QUALITY_THRESHOLDS = (0.33, 0.66)
AIR_QUALITY_COLORS = (COLOR_GREEN, COLOR_YELLOW, COLOR_RED)
AIR_QUALITY_ALPHA = 0.52

# Качество воздуха, детальная шкала (пять корзин)
AIR_QUALITY_FINE_THRESHOLDS = (0.2, 0.4, 0.6, 0.8)
AIR_QUALITY_FINE_COLORS = (
    COLOR_GREEN,
    COLOR_LIME,
    COLOR_YELLOW,
    COLOR_ORANGE,
    COLOR_RED,
)
AIR_QUALITY_FINE_ALPHA = 0.92

# Загруженность дорог: цвет
TRAFFIC_LOAD_THRESHOLDS = (0.4, 0.78)
TRAFFIC_LOAD_COLORS = (COLOR_GREEN, COLOR_YELLOW, COLOR_RED)
TRAFFIC_LOAD_ALPHA = 0.85

# Загруженность дорог: толщина линии
TRAFFIC_WIDTH_THRESHOLDS = (0.3, 0.6, 0.8)
TRAFFIC_WIDTHS = (2.0, 4.0, 6.0, 8.0)

# --- Внешние дороги (OSM highway)
# Надбавка к нагрузке по классу дороги
ROAD_CLASS_LOAD_BONUS = {
    'motorway': 0.35,
    'trunk': 0.35,
    'primary': 0.25,
    'secondary': 0.15,
}
# Толщина линии по классу дороги
ROAD_CLASS_WIDTH = {
    'motorway': 4.0,
    'trunk': 4.0,
    'primary': 3.0,
}
ROAD_DEFAULT_WIDTH = 2.0
# Радиус спада нагрузки от центра города (градусы)
ROAD_LOAD_RADIUS_DEG = 0.08
# Таймаут запроса Overpass (секунды, передаётся в сам запрос)
OVERPASS_TIMEOUT_S = 25


class SamplerKind(str, Enum):
    """Генератор синтетического поля."""

    HARMONIC = 'harmonic'
    CORRIDOR = 'corridor'


class SaddleMode(str, Enum):
    """Разрешение седловых клеток marching squares."""

    NAIVE = 'naive'
    CENTER = 'center'


def default_sampler_kind() -> SamplerKind:
    return SamplerKind.HARMONIC


def default_saddle_mode() -> SaddleMode:
    return SaddleMode.NAIVE
