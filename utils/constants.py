DEPARTMENTS = [
    # Administrative and finance
    'الموارد البشرية',
    'المحاسبة والمالية',
    'الإدارة العامة',
    'التأمين والمخاطر',
    'المبيعات والتسويق',
    'العمليات والإنتاج',
    'الشؤون القانونية',
    'خدمة العملاء',
    'التخطيط الاستراتيجي',
    'إدارة المشاريع',
    'الجودة والتطوير',

    # Technical
    'تكنولوجيا المعلومات',
    'تطوير التطبيقات',
    'هندسة البرمجيات',
    'أمن المعلومات والسايبر',
    'الشبكات والبنية التحتية',
    'إدارة قواعد البيانات',
    'الذكاء الاصطناعي وتعلم الآلة',
    'علوم البيانات والتحليل',
    'DevOps والأتمتة',
    'اختبار وضمان الجودة QA',
    'واجهات المستخدم UX/UI Design',
    'الدعم التقني والصيانة',
]

SEED_NAMES = [
    'أحمد محمد الأحمدي', 'فاطمة علي السعدي', 'محمود حسن القحطاني',
    'نورا سعد العتيبي', 'خالد أحمد المطيري', 'سارة عبدالله الدوسري',
    'عبدالعزيز محمد الزهراني', 'هدى عبدالرحمن الشهري', 'يوسف علي الغامدي',
    'ريم خالد العنزي', 'عمر عبدالله الحربي', 'نادية محمد الجهني',
    'إبراهيم سعد البقمي', 'منى حسن الفيصل', 'طارق عبدالعزيز السبيعي',
]

SEED_POSITIONS = [
    'المدير التنفيذي', 'مدير عام', 'رئيس قسم', 'مدير إدارة', 'مشرف أول', 'منسق إداري',
    'مدير مالي', 'محاسب أول', 'محاسب', 'محلل مالي', 'مدقق داخلي',
    'مدير موارد بشرية', 'أخصائي موارد بشرية', 'أخصائي رواتب ومزايا',
    'مهندس برمجيات أول', 'مهندس برمجيات', 'مطور Full Stack', 'مطور Backend',
    'عالم بيانات', 'محلل بيانات', 'مهندس ذكاء اصطناعي',
    'مهندس DevOps', 'مهندس شبكات', 'محلل أمن سيبراني', 'مصمم UX/UI',
    'مهندس QA', 'فني دعم تقني',
]

SEED_EDUCATION_LEVELS = [
    'دكتوراه في علوم الحاسب', 'دكتوراه في الذكاء الاصطناعي',
    'ماجستير علوم حاسب', 'ماجستير هندسة برمجيات', 'ماجستير إدارة أعمال MBA',
    'بكالوريوس علوم حاسب', 'بكالوريوس نظم معلومات', 'بكالوريوس محاسبة',
    'AWS Solutions Architect Associate', 'CCNA - سيسكو مشارك',
    'PMP - إدارة المشاريع المعتمدة', 'دبلوم البرمجة والتطوير',
]

# Canonical gender values; Arabic labels are accepted as input aliases
GENDERS = ('male', 'female')
GENDER_ALIASES = {
    'male': 'male',
    'female': 'female',
    'ذكر': 'male',
    'أنثى': 'female',
}

# Hire dates before this are rejected as implausible
MIN_HIRE_DATE = '1970-01-01'

MIN_EMPLOYEE_AGE = 18
MAX_EMPLOYEE_AGE = 65

IMAGE_MIME_TYPES = [
    'image/jpeg', 'image/jpg', 'image/png', 'image/gif', 'image/webp', 'image/bmp',
]
WORD_MIME_TYPES = [
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
]
TEXT_MIME_TYPES = ['text/plain', 'application/rtf', 'text/rtf']
OFFICE_MIME_TYPES = [
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'application/vnd.ms-powerpoint',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation',
]

ALLOWED_MIME_TYPES = {
    'photo': IMAGE_MIME_TYPES,
    'resume': ['application/pdf'] + WORD_MIME_TYPES + TEXT_MIME_TYPES,
    'contract': ['application/pdf'] + WORD_MIME_TYPES + TEXT_MIME_TYPES,
    'document': ['application/pdf'] + WORD_MIME_TYPES + TEXT_MIME_TYPES + OFFICE_MIME_TYPES,
    'certificate': ['application/pdf'] + IMAGE_MIME_TYPES + WORD_MIME_TYPES,
}

FILE_TYPES = list(ALLOWED_MIME_TYPES.keys())
